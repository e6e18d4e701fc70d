from .generation_brief import GenerationRequest, build_generation_request

__all__ = ["GenerationRequest", "build_generation_request"]
