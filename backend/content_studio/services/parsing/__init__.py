from .json_parser import parse_json_object, strip_markdown_fences

__all__ = ["parse_json_object", "strip_markdown_fences"]
