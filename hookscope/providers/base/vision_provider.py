import base64
from abc import ABC, abstractmethod
from typing import Dict, Any, List


def build_image_message(prompt: str, images: List[bytes], detail: str = "auto") -> Dict[str, Any]:
    """Build one user message carrying a text instruction followed by JPEG images."""
    content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
    for image_data in images:
        image_base64 = base64.b64encode(image_data).decode("utf-8")
        content.append(
            {
                "type": "image_url",
                "image_url": {
                    "url": f"data:image/jpeg;base64,{image_base64}",
                    "detail": detail,
                },
            }
        )
    return {"role": "user", "content": content}


class VisionProvider(ABC):
    """Abstract base class for vision providers."""

    @abstractmethod
    async def analyze_images(self, images: List[bytes], prompt: str, **kwargs) -> Dict[str, Any]:
        """Analyze one or more images against a single instruction."""
        pass

    async def analyze_image(self, image_data: bytes, prompt: str, **kwargs) -> Dict[str, Any]:
        """Analyze a single image."""
        return await self.analyze_images([image_data], prompt, **kwargs)

    async def close(self):
        """Close the provider and cleanup resources."""
        pass
