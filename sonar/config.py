from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError
from .ranges import parse_base, parse_cidr
from .scheduler import SchedulerMode

MAX_CONCURRENCY = 1024
MAX_TIMEOUT_MS = 60_000


def _as_configuration_error(exc: ValidationError) -> ConfigurationError:
    # Flatten pydantic's error list into one readable line
    messages = []
    for err in exc.errors():
        loc = '.'.join(str(part) for part in err.get('loc', ()))
        msg = err.get('msg', 'invalid value').removeprefix('Value error, ')
        messages.append(f"{loc}: {msg}" if loc else msg)
    return ConfigurationError('; '.join(messages))


class RangeSpec(BaseModel):
    """
    Which addresses to sweep: a CIDR block OR a base/start/end triple.
    Exactly one form must be supplied.
    """
    model_config = ConfigDict(frozen=True)

    cidr: Optional[str] = None
    base: Optional[str] = None
    # Only bounded for the base form; ignored alongside a CIDR
    start: int = 1
    end: int = 255

    @field_validator('cidr')
    def validate_cidr(cls, v):
        if v is not None:
            parse_cidr(v)
            v = v.strip()
        return v

    @field_validator('base')
    def validate_base(cls, v):
        if v is not None:
            v = parse_base(v)
        return v

    @model_validator(mode='after')
    def check_one_form(self):
        if self.cidr is not None and self.base is not None:
            raise ValueError("Supply either a CIDR or a base/start/end range, not both")
        if self.cidr is None and self.base is None:
            raise ValueError("No range given: supply a CIDR or a base prefix")
        if self.base is not None:
            for name in ("start", "end"):
                value = getattr(self, name)
                if not 1 <= value <= 255:
                    raise ValueError(f"{name} ({value}) must be between 1 and 255")
        if self.base is not None and self.end < self.start:
            raise ValueError(f"end ({self.end}) is lower than start ({self.start})")
        return self

    @classmethod
    def parse(cls, cidr: Optional[str] = None, base: Optional[str] = None,
              start: int = 1, end: int = 255) -> "RangeSpec":
        try:
            return cls(cidr=cidr, base=base, start=start, end=end)
        except ValidationError as e:
            raise _as_configuration_error(e) from None

    @property
    def form(self) -> str:
        return 'cidr' if self.cidr is not None else 'base'

    @property
    def label(self) -> str:
        if self.cidr is not None:
            return self.cidr
        return f"{self.base}.{self.start}-{self.end}"


class ScanConfig(BaseModel):
    """
    Validation model for sweep parameters.
    Enforces strict types and safe ranges before any probe is sent.
    """
    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(500, gt=0, le=MAX_TIMEOUT_MS)
    concurrency: int = Field(64, ge=1, le=MAX_CONCURRENCY)
    include_unreachable: bool = False
    show_progress: bool = False
    strategy: Literal['auto', 'thread', 'process'] = 'auto'
    csv_path: Optional[str] = None
    json_path: Optional[str] = None

    @classmethod
    def parse(cls, **options) -> "ScanConfig":
        try:
            return cls(**options)
        except ValidationError as e:
            raise _as_configuration_error(e) from None

    @property
    def mode(self) -> SchedulerMode:
        return SchedulerMode.from_concurrency(self.concurrency)
