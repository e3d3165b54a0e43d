"""JSON:API rulesets."""

from .content_type import json_api_content_type
from .documents import compound_documents, disallow_singleton_delete_or_post
from .pagination import pagination_rules
from .resource_objects import resource_object_rules
from .status_codes import status_code_rules

__all__ = [
    'compound_documents',
    'disallow_singleton_delete_or_post',
    'json_api_content_type',
    'pagination_rules',
    'resource_object_rules',
    'status_code_rules',
]
