"""
Data models for the DID ledger contract.
"""
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class DIDRecord(BaseModel):
    """Identity record stored on the ledger under its DID"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    did: StrictStr = Field(min_length=1)
    name: StrictStr
    credentials: StrictStr
    verified: StrictBool = False
