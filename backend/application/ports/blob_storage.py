"""파일(블롭) 스토리지 포트 인터페이스"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from domain.entities.order import StoredFileEntity


class BlobStorage(ABC):
    @abstractmethod
    async def store(self, content: bytes, original_name: str, mimetype: str,
                    folder: str) -> StoredFileEntity: ...
    @abstractmethod
    async def delete(self, path: str) -> bool:
        """best-effort 삭제. 실패 시 예외 대신 False"""


@dataclass
class IncomingFile:
    """요청으로 들어온 업로드 파일 (아직 저장되지 않음)"""
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)
