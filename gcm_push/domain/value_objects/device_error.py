from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    PERMANENT = "permanent"
    MESSAGE = "message"
    TRANSIENT = "transient"


class DeviceErrorCode(str, Enum):
    """Error codes the API reports for a single recipient."""

    MISSING_REGISTRATION = "MissingRegistration"
    INVALID_REGISTRATION = "InvalidRegistration"
    NOT_REGISTERED = "NotRegistered"
    INVALID_PACKAGE_NAME = "InvalidPackageName"
    MISMATCH_SENDER_ID = "MismatchSenderId"
    MESSAGE_TOO_BIG = "MessageTooBig"
    INVALID_DATA_KEY = "InvalidDataKey"
    INVALID_TTL = "InvalidTtl"
    INVALID_APNS_CREDENTIAL = "InvalidApnsCredential"
    UNAVAILABLE = "Unavailable"
    INTERNAL_SERVER_ERROR = "InternalServerError"
    DEVICE_MESSAGE_RATE_EXCEEDED = "DeviceMessageRateExceeded"
    TOPICS_MESSAGE_RATE_EXCEEDED = "TopicsMessageRateExceeded"
    UNKNOWN = "Unknown"

    @classmethod
    def from_wire(cls, value: str) -> DeviceErrorCode:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def kind(self) -> ErrorKind:
        if self in _PERMANENT:
            return ErrorKind.PERMANENT
        if self in _MESSAGE:
            return ErrorKind.MESSAGE
        # Unknown codes are retried like transient ones
        return ErrorKind.TRANSIENT

    def should_remove_registration(self) -> bool:
        return self.kind is ErrorKind.PERMANENT

    def is_retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT


_PERMANENT = {
    DeviceErrorCode.MISSING_REGISTRATION,
    DeviceErrorCode.INVALID_REGISTRATION,
    DeviceErrorCode.NOT_REGISTERED,
    DeviceErrorCode.INVALID_PACKAGE_NAME,
    DeviceErrorCode.MISMATCH_SENDER_ID,
}

_MESSAGE = {
    DeviceErrorCode.MESSAGE_TOO_BIG,
    DeviceErrorCode.INVALID_DATA_KEY,
    DeviceErrorCode.INVALID_TTL,
    DeviceErrorCode.INVALID_APNS_CREDENTIAL,
}
