# model/upload.py
from pydantic import BaseModel


class PendingUpload(BaseModel):
    id: str  # "<bucket>/<path>"
    file_name: str
    file_size: int
    bucket: str
    path: str
    uploaded_bytes: int = 0
    total_bytes: int = 0
    created_at: float
    last_updated_at: float

    @staticmethod
    def make_id(bucket: str, path: str) -> str:
        return f"{bucket}/{path}"
