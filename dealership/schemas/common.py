from pydantic import BaseModel, Field


class MessageSchema(BaseModel):
    """Plain acknowledgement returned by delete endpoints."""
    message: str


class PaginationSchema(BaseModel):
    """Page metadata. hasNextPage is true iff currentPage * pageSize < total."""
    currentPage: int = Field(..., ge=1, description="1-indexed page actually returned")
    pageSize: int = Field(..., ge=1, description="Items per page")
    totalPages: int = Field(..., ge=0, description="Number of pages")
    total: int = Field(..., ge=0, description="Items across all pages")
    hasNextPage: bool
    hasPrevPage: bool
