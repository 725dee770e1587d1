"""Exceptions raised by the pricing engine and its collaborators."""


class PricingError(Exception):
    """Base exception for price plan comparison errors."""
    pass


class InsufficientDataError(PricingError):
    """Not enough readings to integrate over."""

    def __init__(self, reading_count: int, meter_id: str | None = None, detail: str | None = None):
        self.reading_count = reading_count
        self.meter_id = meter_id
        message = detail or f"At least 2 readings are needed, got {reading_count}"
        if meter_id:
            message = f"{message} (meter {meter_id})"
        super().__init__(message)


class InvalidPlanError(PricingError):
    """A price plan has a non-positive rate or a malformed multiplier set."""

    def __init__(self, supplier: str, reason: str):
        self.supplier = supplier
        self.reason = reason
        super().__init__(f"Invalid price plan for {supplier}: {reason}")


class UnknownMeterError(PricingError):
    """No readings are stored for the meter."""

    def __init__(self, meter_id: str):
        self.meter_id = meter_id
        super().__init__(f"No readings found for meter {meter_id}")


class UnknownAccountError(PricingError):
    """The meter is not linked to a supplier account."""

    def __init__(self, meter_id: str):
        self.meter_id = meter_id
        super().__init__(f"No account found for meter {meter_id}")


class UnknownPlanError(PricingError):
    """The account's supplier has no plan in the catalogue."""

    def __init__(self, supplier: str, meter_id: str | None = None):
        self.supplier = supplier
        self.meter_id = meter_id
        message = f"No price plan found for supplier {supplier}"
        if meter_id:
            message = f"{message} (meter {meter_id})"
        super().__init__(message)


class InvalidReadingsError(PricingError, ValueError):
    """Readings submitted for storage are malformed."""
    pass


class RemoteReadingsError(PricingError):
    """Failure fetching readings from a remote readings service."""
    pass


class CatalogueError(PricingError, ValueError):
    """The price plan catalogue or account directory cannot be parsed."""

    def __init__(self, config_path, reason: str):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Invalid catalogue {config_path}: {reason}")
