"""
Response projection.

Selects and orders a subset of a resource's fields for display. Fields that
the resource does not have are left out rather than padded.
"""

from typing import Any, Dict, List, Sequence, Union


def project(resource: Dict[str, Any], fields: Sequence[str]) -> Dict[str, Any]:
    """
    Project a single resource.

    Args:
        resource: Decoded resource mapping
        fields: Field names in display order

    Returns:
        New dict with the requested fields present in the resource, in the
        requested order
    """
    return {name: resource[name] for name in fields if name in resource}


def project_all(resources: List[Dict[str, Any]], fields: Sequence[str]) -> List[Dict[str, Any]]:
    """Project each resource of a list independently, keeping list order."""
    return [project(resource, fields) for resource in resources]


def project_data(
    data: Union[Dict[str, Any], List[Dict[str, Any]], None],
    fields: Sequence[str]
) -> Union[Dict[str, Any], List[Dict[str, Any]], None]:
    """
    Project the data member of a response, whatever its shape.

    A single object yields a dict, an array yields a list, None stays None.
    """
    if data is None:
        return None
    if isinstance(data, list):
        return project_all(data, fields)
    return project(data, fields)
