from __future__ import annotations

from typing import Annotated, Any

from pydantic import (AfterValidator, BaseModel, ConfigDict, EmailStr, Field,
                      ValidationError, ValidationInfo,
                      ValidatorFunctionWrapHandler, WrapValidator,
                      field_validator)
from pydantic_core import PydanticCustomError

from authapi.shared.errors.validation_types import ValidationErrorType

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 25


def _invalid_email() -> PydanticCustomError:
    return PydanticCustomError(
        ValidationErrorType.EMAIL_INVALID,
        "Invalid email address",
        {},
    )


def parse_email(value: Any, handler: ValidatorFunctionWrapHandler) -> str:
    """Run the EmailStr check and report any failure with a single message."""
    if isinstance(value, str):
        # EmailStr also takes "Name <addr>"; only bare addresses are accepted here.
        if "<" in value:
            raise _invalid_email()
        value = value.strip()
    try:
        return handler(value)
    except ValidationError as exc:
        raise _invalid_email() from exc


def validate_email(value: str) -> str:
    value = value.lower()
    tld = value.rsplit(".", 1)[-1]
    if len(tld) < 2 or not tld.isalpha():
        raise _invalid_email()
    return value


def validate_name(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError(
            ValidationErrorType.NAME_EMPTY,
            "Name is required",
            {},
        )
    return value.strip()


def validate_password_length(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_TOO_SHORT,
            "Password must be more than 8 characters",
            {"min_length": PASSWORD_MIN_LENGTH},
        )
    if len(value) > PASSWORD_MAX_LENGTH:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_TOO_LONG,
            "Password must be less than 25 characters",
            {"max_length": PASSWORD_MAX_LENGTH},
        )
    return value


EmailField = Annotated[EmailStr, WrapValidator(parse_email), AfterValidator(validate_email)]
NameField = Annotated[str, AfterValidator(validate_name)]
PasswordField = Annotated[str, AfterValidator(validate_password_length)]


def _confirm_matches(value: str, info: ValidationInfo) -> str:
    password = info.data.get("password")
    if password is not None and value != password:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_MISMATCH,
            "Passwords do not match",
            {},
        )
    return value


class RegisterRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: NameField
    email: EmailField
    password: PasswordField
    password_conf: str = Field(alias="passwordConf")

    @field_validator("password_conf")
    @classmethod
    def validate_confirmation(cls, value: str, info: ValidationInfo) -> str:
        return _confirm_matches(value, info)


class LoginRequestDTO(BaseModel):
    email: EmailField
    password: str  # No length policy on login beyond the minimum

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_SHORT,
                "Invalid email or password",
                {},
            )
        return value


class ChangePasswordRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: PasswordField = Field(alias="oldPassword")
    password: str
    password_conf: str = Field(alias="passwordConf")

    @field_validator("password")
    @classmethod
    def validate_new_password(cls, value: str, info: ValidationInfo) -> str:
        validate_password_length(value)
        if value == info.data.get("old_password"):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_UNCHANGED,
                "New password is the same as previous one",
                {},
            )
        return value

    @field_validator("password_conf")
    @classmethod
    def validate_confirmation(cls, value: str, info: ValidationInfo) -> str:
        return _confirm_matches(value, info)


class LoginSuccessDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "success"
    access_token: str = Field(serialization_alias="accessToken")


class StatusDTO(BaseModel):
    status: str = "success"
