"""
Typed exception hierarchy for klirr.

Every error carries a machine-readable ``code`` class attribute and keeps
its structured data as attributes, so callers catch by type and report by
field instead of parsing messages.

    KlirrError
    |
    +-- PeriodArithmeticError      StartAfterEnd, PeriodKindMismatch
    +-- PeriodsOffError            RecordsOffMustNotContainOffsetPeriod,
    |                              TargetPeriodInPeriodsOff
    +-- GranularityMismatchError   GranularityTooCoarse,
    |                              InvalidGranularityForTimeOff
    +-- CadenceIncompatibleError   CannotInvoiceMonthWhenBiWeekly,
    |                              CannotExpenseForFortnightWhenMonthly,
    |                              CannotExpenseForMonthWhenBiWeekly
    +-- ExpenseMissingError        TargetPeriodMustHaveExpenses
    +-- ParseInvalidError          InvalidCurrency, InvalidDay, InvalidDate,
    |                              InvalidPeriod, InvalidExpenseItem, ...
    +-- CryptoError                AESDecryptionFailed, InvalidAESBytesTooShort,
    |                              InvalidUtf8, InvalidHexString,
    |                              EmailEncryptionPasswordTooShort
    +-- FxFetchError               NetworkError, ParseError
    +-- FxRateMissingError         FoundNoExchangeRate
    +-- RenderFailureError         RenderError, InvalidDecimalF64Conversion
    +-- TransportFailureError      EmailSendFailed
    +-- StorageError               FileNotFound, StorageReadError,
                                   StorageWriteError,
                                   SpecifiedOutputPathDoesNotExist
"""

from typing import Any


class KlirrError(Exception):
    """Base exception for all klirr errors."""

    code: str = "KLIRR_ERROR"


# Period arithmetic


class PeriodArithmeticError(KlirrError):
    code: str = "PERIOD_ARITHMETIC"


class StartAfterEnd(PeriodArithmeticError):
    """Elapsed periods asked for with a start later than the end."""

    code: str = "START_AFTER_END"

    def __init__(self, start: Any, end: Any):
        self.start = start
        self.end = end
        super().__init__(f"Start period {start} is after end period {end}")


class PeriodKindMismatch(PeriodArithmeticError):
    """Monthly and fortnightly periods were mixed."""

    code: str = "PERIOD_KIND_MISMATCH"

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"Period kind mismatch, expected {expected}, found {found}")


# Periods off


class PeriodsOffError(KlirrError):
    code: str = "PERIODS_OFF"


class RecordsOffMustNotContainOffsetPeriod(PeriodsOffError):
    code: str = "RECORDS_OFF_CONTAIN_OFFSET_PERIOD"

    def __init__(self, offset_period: Any):
        self.offset_period = offset_period
        super().__init__(
            f"Record of periods off must not contain the offset period {offset_period}"
        )


class TargetPeriodInPeriodsOff(PeriodsOffError):
    code: str = "TARGET_PERIOD_IN_PERIODS_OFF"

    def __init__(self, period: Any):
        self.period = period
        super().__init__(
            f"Cannot invoice for {period}, it is recorded as a period off"
        )


# Granularity


class GranularityMismatchError(KlirrError):
    code: str = "GRANULARITY_MISMATCH"


class GranularityTooCoarse(GranularityMismatchError):
    code: str = "GRANULARITY_TOO_COARSE"

    def __init__(self, granularity: Any, max_granularity: Any, period: Any):
        self.granularity = granularity
        self.max_granularity = max_granularity
        self.period = period
        super().__init__(
            f"Granularity {granularity} is too coarse for period {period}, "
            f"max is {max_granularity}"
        )


class InvalidGranularityForTimeOff(GranularityMismatchError):
    code: str = "INVALID_GRANULARITY_FOR_TIME_OFF"

    def __init__(self, free: Any, service: Any):
        self.free = free
        self.service = service
        super().__init__(
            f"Time off is given in {free} but the service is priced per {service}"
        )


# Cadence


class CadenceIncompatibleError(KlirrError):
    code: str = "CADENCE_INCOMPATIBLE"


class CannotInvoiceMonthWhenBiWeekly(CadenceIncompatibleError):
    code: str = "CANNOT_INVOICE_MONTH_WHEN_BI_WEEKLY"

    def __init__(self):
        super().__init__("A bi-weekly cadence cannot invoice per month")


class CannotExpenseForFortnightWhenMonthly(CadenceIncompatibleError):
    code: str = "CANNOT_EXPENSE_FOR_FORTNIGHT_WHEN_MONTHLY"

    def __init__(self, period: Any):
        self.period = period
        super().__init__(
            f"Cannot record expenses for fortnight {period} with a monthly cadence"
        )


class CannotExpenseForMonthWhenBiWeekly(CadenceIncompatibleError):
    code: str = "CANNOT_EXPENSE_FOR_MONTH_WHEN_BI_WEEKLY"

    def __init__(self, period: Any):
        self.period = period
        super().__init__(
            f"Cannot record expenses for month {period} with a bi-weekly cadence"
        )


# Expenses


class ExpenseMissingError(KlirrError):
    code: str = "EXPENSE_MISSING"


class TargetPeriodMustHaveExpenses(ExpenseMissingError):
    code: str = "TARGET_PERIOD_MUST_HAVE_EXPENSES"

    def __init__(self, period: Any):
        self.period = period
        super().__init__(f"No expenses recorded for {period}")


# Parsing


class ParseInvalidError(KlirrError):
    """Base for input that could not be parsed or failed validation."""

    code: str = "PARSE_INVALID"

    def __init__(self, value: Any, reason: str = ""):
        self.value = value
        self.reason = reason
        label = self.__class__.__name__
        message = f"{label}: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidCurrency(ParseInvalidError):
    code: str = "INVALID_CURRENCY"


class InvalidDay(ParseInvalidError):
    code: str = "INVALID_DAY"


class InvalidDate(ParseInvalidError):
    code: str = "INVALID_DATE"


class InvalidPeriod(ParseInvalidError):
    code: str = "INVALID_PERIOD"


class InvalidExpenseItem(ParseInvalidError):
    code: str = "INVALID_EXPENSE_ITEM"


class InvalidNetDays(ParseInvalidError):
    code: str = "INVALID_NET_DAYS"


class InvalidHexColor(ParseInvalidError):
    code: str = "INVALID_HEX_COLOR"


class InvalidLanguage(ParseInvalidError):
    code: str = "INVALID_LANGUAGE"


class InvalidLayout(ParseInvalidError):
    code: str = "INVALID_LAYOUT"


class InvalidInvoiceNumber(ParseInvalidError):
    code: str = "INVALID_INVOICE_NUMBER"


class InvalidQuantity(ParseInvalidError):
    code: str = "INVALID_QUANTITY"


class InvalidEmailAddress(ParseInvalidError, ValueError):
    """Also a ValueError so pydantic validators report it as a field error."""

    code: str = "INVALID_EMAIL_ADDRESS"


class InvalidData(ParseInvalidError):
    """A persisted record has the wrong shape."""

    code: str = "INVALID_DATA"


# Crypto


class CryptoError(KlirrError):
    code: str = "CRYPTO_ERROR"


class AESDecryptionFailed(CryptoError):
    code: str = "AES_DECRYPTION_FAILED"

    def __init__(self):
        super().__init__(
            "Failed to decrypt the SMTP app password, wrong encryption password?"
        )


class InvalidAESBytesTooShort(CryptoError):
    code: str = "INVALID_AES_BYTES_TOO_SHORT"

    def __init__(self, expected_at_least: int, found: int):
        self.expected_at_least = expected_at_least
        self.found = found
        super().__init__(
            f"Sealed box too short, expected at least {expected_at_least} bytes, "
            f"found {found}"
        )


class InvalidUtf8(CryptoError):
    code: str = "INVALID_UTF8"

    def __init__(self):
        super().__init__("Decrypted bytes are not valid UTF-8")


class InvalidHexString(CryptoError):
    code: str = "INVALID_HEX_STRING"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid hex string: {reason}")


class EmailEncryptionPasswordTooShort(CryptoError):
    code: str = "EMAIL_ENCRYPTION_PASSWORD_TOO_SHORT"

    def __init__(self, min_length: int, found: int):
        self.min_length = min_length
        self.found = found
        super().__init__(
            f"Encryption password must be at least {min_length} characters, "
            f"got {found}"
        )


# Exchange rates


class FxFetchError(KlirrError):
    code: str = "FX_FETCH_FAILED"


class NetworkError(FxFetchError):
    code: str = "NETWORK_ERROR"

    def __init__(self, underlying: str):
        self.underlying = underlying
        super().__init__(f"Network error: {underlying}")


class ParseError(FxFetchError):
    code: str = "FX_PARSE_ERROR"

    def __init__(self, underlying: str):
        self.underlying = underlying
        super().__init__(f"Failed to parse exchange rate response: {underlying}")


class FxRateMissingError(KlirrError):
    code: str = "FX_RATE_MISSING"


class FoundNoExchangeRate(FxRateMissingError):
    code: str = "FOUND_NO_EXCHANGE_RATE"

    def __init__(self, target: Any, base: Any):
        self.target = target
        self.base = base
        super().__init__(f"Found no exchange rate from {base} to {target}")


# Rendering


class RenderFailureError(KlirrError):
    code: str = "RENDER_FAILURE"


class RenderError(RenderFailureError):
    code: str = "RENDER_ERROR"

    def __init__(self, underlying: str):
        self.underlying = underlying
        super().__init__(f"Failed to render PDF: {underlying}")


class InvalidDecimalF64Conversion(RenderFailureError):
    code: str = "INVALID_DECIMAL_F64_CONVERSION"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Cannot represent {value} as a finite float")


# Transport


class TransportFailureError(KlirrError):
    code: str = "TRANSPORT_FAILURE"


class EmailSendFailed(TransportFailureError):
    code: str = "EMAIL_SEND_FAILED"

    def __init__(self, underlying: str):
        self.underlying = underlying
        super().__init__(f"Failed to send email: {underlying}")


# Storage


class StorageError(KlirrError):
    code: str = "STORAGE_ERROR"


class FileNotFound(StorageError):
    code: str = "FILE_NOT_FOUND"

    def __init__(self, path: Any):
        self.path = path
        super().__init__(f"File not found: {path}")


class StorageReadError(StorageError):
    code: str = "STORAGE_READ_ERROR"

    def __init__(self, path: Any, underlying: str):
        self.path = path
        self.underlying = underlying
        super().__init__(f"Failed to read {path}: {underlying}")


class StorageWriteError(StorageError):
    code: str = "STORAGE_WRITE_ERROR"

    def __init__(self, path: Any, underlying: str):
        self.path = path
        self.underlying = underlying
        super().__init__(f"Failed to write {path}: {underlying}")


class SpecifiedOutputPathDoesNotExist(StorageError):
    code: str = "SPECIFIED_OUTPUT_PATH_DOES_NOT_EXIST"

    def __init__(self, path: Any):
        self.path = path
        super().__init__(f"Parent directory of output path does not exist: {path}")
