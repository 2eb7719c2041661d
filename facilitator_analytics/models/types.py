from datetime import datetime

from pydantic import AfterValidator
from typing_extensions import Annotated

from facilitator_analytics.utils import normalize_address, to_utc

EthereumAddress = Annotated[str, AfterValidator(normalize_address)]
UtcDatetime = Annotated[datetime, AfterValidator(to_utc)]
