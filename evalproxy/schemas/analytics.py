from typing import Any, Dict, List
from pydantic import BaseModel


class TopUser(BaseModel):
    id: str
    name: Any
    commentCount: int


class TopUsersResponse(BaseModel):
    users: List[TopUser]


class PostsResponse(BaseModel):
    # upstream post records plus commentCount and userName
    posts: List[Dict[str, Any]]
