"""
Register Use Case DTOs (Data Transfer Objects)

Command/Response pattern:
- RegisterCommand: Input to use case (validated business intent)
- RegisterResponse: Output from use case (structured result)
"""

from pydantic import BaseModel


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    """

    email: str
    password: str
    first_name: str
    last_name: str


class RegisterResponse(BaseModel):
    """Registered account"""

    id: str
    email: str
    first_name: str
    last_name: str
