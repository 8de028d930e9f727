"""File backend and password hashing policy checks."""

from __future__ import annotations

from gatehouse.config.schema import (
    ARGON2ID,
    DEFAULT_PASSWORD_CONFIG,
    DEFAULT_PASSWORD_SHA512_CONFIG,
    SHA512,
    VALID_PASSWORD_ALGORITHMS,
    FileBackendConfig,
    PasswordConfig,
    default_password_config,
)
from gatehouse.validator.diagnostics import DiagnosticKind, Diagnostics


MIN_SALT_LENGTH = 8
MIN_KEY_LENGTH = 16
MEMORY_PER_THREAD = 8


def validate_file_backend(config: FileBackendConfig, validator: Diagnostics) -> None:
    if not config.path:
        validator.push(
            "Please provide a `path` for the users database in `authentication_backend`",
            DiagnosticKind.MISSING_REQUIRED_FIELD,
        )

    if config.password is None:
        config.password = default_password_config()
        return

    validate_password_policy(config.password, validator)


def validate_password_policy(password: PasswordConfig, validator: Diagnostics) -> None:
    if not password.algorithm:
        password.algorithm = DEFAULT_PASSWORD_CONFIG.algorithm
    else:
        password.algorithm = password.algorithm.lower()
        if password.algorithm not in VALID_PASSWORD_ALGORITHMS:
            validator.push(
                "Unknown hashing algorithm supplied, valid values are "
                f"{ARGON2ID} and {SHA512}, you configured '{password.algorithm}'",
                DiagnosticKind.INVALID_ENUM_VALUE,
            )

    if password.iterations == 0:
        if password.algorithm == ARGON2ID:
            password.iterations = DEFAULT_PASSWORD_CONFIG.iterations
        else:
            password.iterations = DEFAULT_PASSWORD_SHA512_CONFIG.iterations
    elif password.iterations < 1:
        validator.push(
            f"The number of iterations specified is invalid, must be 1 or more, you configured {password.iterations}",
            DiagnosticKind.OUT_OF_RANGE,
        )

    if password.salt_length == 0:
        password.salt_length = DEFAULT_PASSWORD_CONFIG.salt_length
    elif password.salt_length < MIN_SALT_LENGTH:
        validator.push(
            f"The salt length must be {MIN_SALT_LENGTH} or more, you configured {password.salt_length}",
            DiagnosticKind.OUT_OF_RANGE,
        )

    if password.algorithm == ARGON2ID:
        _validate_argon2id(password, validator)


def _validate_argon2id(password: PasswordConfig, validator: Diagnostics) -> None:
    if password.parallelism == 0:
        password.parallelism = DEFAULT_PASSWORD_CONFIG.parallelism
    elif password.parallelism < 1:
        validator.push(
            f"Parallelism for argon2id must be 1 or more, you configured {password.parallelism}",
            DiagnosticKind.OUT_OF_RANGE,
        )

    if password.memory == 0:
        password.memory = DEFAULT_PASSWORD_CONFIG.memory

    # Also applies to a defaulted memory when parallelism is large.
    minimum_memory = password.parallelism * MEMORY_PER_THREAD
    if password.memory < minimum_memory:
        validator.push(
            f"Memory for argon2id must be {minimum_memory} or more (parallelism * {MEMORY_PER_THREAD}), "
            f"you configured memory as {password.memory} and parallelism as {password.parallelism}",
            DiagnosticKind.DEPENDENT_CONSTRAINT,
        )

    if password.key_length == 0:
        password.key_length = DEFAULT_PASSWORD_CONFIG.key_length
    elif password.key_length < MIN_KEY_LENGTH:
        validator.push(
            f"Key length for argon2id must be {MIN_KEY_LENGTH} or more, you configured {password.key_length}",
            DiagnosticKind.OUT_OF_RANGE,
        )
