from pydantic import BaseModel


class FetchResult(BaseModel):
    """Website content fetched through Firecrawl."""

    url: str
    success: bool = False
    content: str | None = None
    structured_data: dict | None = None
    title: str | None = None
    error: str | None = None
