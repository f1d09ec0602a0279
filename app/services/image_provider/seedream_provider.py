from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from app.config import SeedreamConfig
from app.errors import ConfigurationError, ProviderError
from app.services.resolution import select_resolution

from .base import describe_image, to_data_uri

log = logging.getLogger("vintage-card")

SEEDREAM_STYLE_PROMPT = """
艺术风格：
- 模仿vintage comic book和老式动画的手绘质感
- 使用有限的配色方案：米黄色、红色、黑色为主
- 添加纸张老化效果：褶皱、斑点、泛黄
- 使用半调网点（halftone dots）模拟旧印刷效果

视觉特征：
- 粗黑色描边线条
- 卡通化的人物轮廓，简化细节
- 夸张的表情和动作
- 扁平化配色，避免过多渐变

纹理质感：
- 纸张纹理：vintage paper texture
- 印刷瑕疵：轻微的墨点和不均匀
- 边缘磨损效果
- 复古海报的颗粒感

整体氛围：
- 1930-1940年代的怀旧感
- 温暖、欢快的色调
- 手工印刷的质朴感
- 保持原照片的主体构图

重要：保持图像清晰度，适合打印在贺卡上
"""


class SeedreamGenerator:
    """Volcengine Ark Seedream image-to-image call (OpenAI style generations API).

    One request per call, no retry and no client-side timeout: failures only
    surface through the HTTP response or the transport error.
    """

    def __init__(
        self,
        config: SeedreamConfig,
        *,
        prompt: str = SEEDREAM_STYLE_PROMPT,
    ) -> None:
        self.config = config
        self.prompt = prompt

    def build_payload(self, image_bytes: bytes, mime_type: Optional[str] = None) -> Dict[str, Any]:
        info = describe_image(image_bytes, mime_type)
        size = select_resolution(info.width, info.height)
        log.info(
            "[seedream.size] input=%sx%s selected=%s",
            info.width,
            info.height,
            size,
        )
        return {
            "model": self.config.model,
            "prompt": self.prompt,
            # Ark rejects bare base64 here; it has to be a full data URI
            "image": to_data_uri(image_bytes, info.mime_type),
            "size": size,
            "encoding_format": "base64",
            "watermark": False,
        }

    def generate(self, image_bytes: bytes, *, mime_type: Optional[str] = None) -> str:
        if not self.config.model:
            raise ConfigurationError(
                "Seedream Endpoint ID is missing. Please configure SEEDREAM_ENDPOINT_ID."
            )
        if not self.config.api_key:
            raise ConfigurationError("Seedream API Key (Access Key) is missing.")

        payload = self.build_payload(image_bytes, mime_type)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

        try:
            with httpx.Client(proxy=self.config.proxy, timeout=None) as client:
                r = client.post(self.config.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            log.warning("[seedream.generate] transport error: %s", exc)
            raise ProviderError(f"Seedream request failed: {exc}") from exc

        if r.status_code >= 400:
            message = _error_message(r)
            log.error("[seedream.generate] status=%s error=%s", r.status_code, message)
            raise ProviderError(message)

        try:
            data = r.json()
        except ValueError as exc:
            raise ProviderError(f"Seedream returned non-JSON body: {exc}") from exc

        items = data.get("data") if isinstance(data, dict) else None
        if items:
            first = items[0] or {}
            if first.get("b64_json"):
                return f"data:image/png;base64,{first['b64_json']}"
            if first.get("url"):
                return first["url"]

        raise ProviderError("No image data received from Seedream API")


def _error_message(response: httpx.Response) -> str:
    fallback = f"API Request failed with status {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return fallback
