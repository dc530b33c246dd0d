import pytest

from xoso_digest.config import Settings
from xoso_digest.models import Source


SAMPLE_DESCRIPTION = (
    "[Hà Nội]<br>G.ĐB: 12345<br />G.1: 67890<BR/>"
    "Kết quả được cập nhật lúc 18h30<br>"
    "[Hải Phòng]<br>G.ĐB: 54321"
)


@pytest.fixture
def settings():
    return Settings(
        telegram_token="123:secret-token",
        telegram_chat_id="-100200300",
        request_timeout=1.0,
        concurrency=3,
    )


@pytest.fixture
def sources():
    return (
        Source("Miền Bắc", "https://feeds.example.com/xsmb.rss"),
        Source("Miền Trung", "https://feeds.example.com/xsmt.rss"),
        Source("Miền Nam", "https://feeds.example.com/xsmn.rss"),
    )


@pytest.fixture
def sample_description():
    return SAMPLE_DESCRIPTION
