from typing import Any, List, Optional
from pydantic import BaseModel, Field


class UploadResultPayload(BaseModel):
    file_url: str


class ImgurImageData(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    datetime: Optional[int] = None
    type: Optional[str] = None
    animated: Optional[bool] = None
    width: Optional[int] = None
    height: Optional[int] = None
    size: Optional[int] = None
    views: Optional[int] = None
    bandwidth: Optional[int] = None
    vote: Any = None  # shape unknown upstream, passed through untouched
    favorite: Optional[bool] = None
    nsfw: Optional[bool] = None
    section: Optional[str] = None
    account_url: Optional[str] = None
    account_id: Optional[int] = None
    is_ad: Optional[bool] = None
    in_most_viral: Optional[bool] = None
    tags: Optional[List[str]] = None
    ad_type: Optional[int] = None
    ad_url: Optional[str] = None
    in_gallery: Optional[bool] = None
    deletehash: Optional[str] = None
    name: Optional[str] = None
    link: Optional[str] = None


class ImgurImageResult(BaseModel):
    success: bool
    status: int
    data: ImgurImageData = Field(default_factory=ImgurImageData)
