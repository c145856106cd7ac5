from enum import Enum
from typing import Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class Framework(str, Enum):
    VITE = "vite"
    NEXTJS = "nextjs"
    CRA = "cra"


class Language(str, Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"


class Selection(BaseModel):
    """Framework/language pair chosen by the user.

    Either field may be ``None`` while the user is still choosing;
    ``is_complete`` tells whether it can be provisioned.
    """
    model_config = ConfigDict(frozen=True)

    framework: Optional[Framework] = Field(None, description="Frontend framework")
    language: Optional[Language] = Field(None, description="Project language")

    @property
    def is_complete(self) -> bool:
        return self.framework is not None and self.language is not None


class Identity(BaseModel):
    """The GitHub account the access token belongs to"""
    login: str
    name: Optional[str] = None
    id: int
    avatar_url: Optional[str] = None


class RepositoryRecord(BaseModel):
    """Repository identity returned by GitHub when the repository is created"""
    model_config = ConfigDict(frozen=True)

    name: str
    full_name: str
    default_branch: str = "main"
    url: str = Field(..., description="Web URL of the repository")


class ProvisioningState(BaseModel):
    """What the client may know about its provisioning run; never holds the token"""
    selection: Optional[Selection] = None
    in_progress: bool = False
    last_error: Optional[str] = None
    repository_url: Optional[str] = None


# Pydantic models for request/response validation
class TokenExchangeRequest(BaseModel):
    """Request model for exchanging an OAuth authorization code"""
    code: str = Field(..., min_length=1, description="Authorization code returned by GitHub")


class TokenExchangeResponse(BaseModel):
    access_token: str


class StandardResponse(BaseModel):
    """Standard API response format"""
    success: bool = Field(..., description="Indicates if the operation was successful")
    message: str = Field(..., description="Human-readable message")
    data: Optional[Dict[str, Any]] = Field(None, description="Response data")
    error_code: Optional[str] = Field(None, description="Error code if applicable")
