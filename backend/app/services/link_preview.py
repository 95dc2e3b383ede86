# 펀딩 아이템 링크 미리보기
# - 상품 페이지 HTML 의 og:title / og:image 메타 태그를 읽습니다.
# - og 태그가 없으면 <title> 을 이름으로 사용합니다.

from html.parser import HTMLParser
from typing import Dict, Optional
from urllib.parse import urljoin

from ..core.http_client import fetch_text

# 일부 쇼핑몰은 봇 User-Agent 에 빈 페이지를 돌려줍니다
PREVIEW_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; GiftipieLinkPreview/1.0)",
    "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
}


class _MetaParser(HTMLParser):
    def __init__(self):
        super().__init__()
        self.meta: Dict[str, str] = {}
        self.title: Optional[str] = None
        self._in_title = False

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        if tag == "meta":
            key = (attrs.get("property") or attrs.get("name") or "").lower()
            content = attrs.get("content")
            if key and content and key not in self.meta:
                self.meta[key] = content.strip()
        elif tag == "title":
            self._in_title = True

    def handle_endtag(self, tag):
        if tag == "title":
            self._in_title = False

    def handle_data(self, data):
        if self._in_title and self.title is None and data.strip():
            self.title = data.strip()


def parse_preview(html: str, base_url: str) -> Dict[str, Optional[str]]:
    parser = _MetaParser()
    parser.feed(html)
    parser.close()

    name = parser.meta.get("og:title") or parser.meta.get("twitter:title") or parser.title
    image = parser.meta.get("og:image") or parser.meta.get("twitter:image")
    if image:
        # 상대 경로 이미지 보정
        image = urljoin(base_url, image)
    return {"item_name": name, "item_image": image}


def fetch_preview(url: str) -> Dict[str, Optional[str]]:
    html = fetch_text("item-link-preview", url, headers=PREVIEW_HEADERS)
    return parse_preview(html, url)
