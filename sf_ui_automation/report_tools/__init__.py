"""Allure reporting helpers."""

from .allure_utils import attach_batch_result, attach_json, attach_text

__all__ = [
    "attach_batch_result",
    "attach_json",
    "attach_text",
]
