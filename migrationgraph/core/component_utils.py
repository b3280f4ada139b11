"""
Helpers for telling custom components apart from standard platform ones
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from migrationgraph.core.models import Component

# Not exhaustive, covers the most common built-in objects
STANDARD_OBJECTS = frozenset([
    'Account',
    'Contact',
    'Lead',
    'Opportunity',
    'Case',
    'Task',
    'Event',
    'Campaign',
    'User',
    'Profile',
    'PermissionSet',
    'Group',
    'Role',
    'Territory',
    'Product2',
    'Pricebook2',
    'PricebookEntry',
    'Quote',
    'Contract',
    'Order',
    'OrderItem',
    'Asset',
    'Solution',
    'Idea',
    'Question',
    'Reply',
    'Attachment',
    'Document',
    'Folder',
    'ContentDocument',
    'ContentVersion',
    'ContentWorkspace',
    'FeedItem',
    'FeedComment',
    'ChatterMessage',
    'EmailMessage',
    'EmailTemplate',
    'Report',
    'Dashboard',
    'DashboardComponent',
])

# Custom object/field (__c), custom metadata (__mdt), platform event (__e),
# big object (__b), external object (__x)
CUSTOM_SUFFIXES = ('__c', '__mdt', '__e', '__b', '__x')

# Types that are never built into the platform
ALWAYS_CUSTOM_TYPES = frozenset(['lwc', 'apex', 'trigger', 'visualforce', 'flow'])


def has_custom_suffix(api_name: Optional[str]) -> bool:
    """True if the API name ends with one of the custom suffixes"""
    return bool(api_name) and api_name.endswith(CUSTOM_SUFFIXES)


def get_parent_object_name(field_api_name: Optional[str]) -> Optional[str]:
    """
    Extract the parent object name from a field API name

    Args:
        field_api_name: Field API name (format: ObjectName.FieldName__c)

    Returns:
        The parent object name, or None if the format is invalid
    """
    if not field_api_name:
        return None
    parts = field_api_name.split('.')
    if len(parts) == 2 and parts[0]:
        return parts[0]
    return None


def get_field_local_name(field_api_name: str) -> str:
    """`Account.Region__c` -> `Region__c`"""
    return field_api_name.rsplit('.', 1)[-1]


def is_custom_object_name(object_name: Optional[str], namespace: Optional[str] = None) -> bool:
    """
    Naming-convention check for an object API name

    Namespaced objects come from managed packages and count as custom.
    Unknown names without a custom suffix are treated as custom too,
    only the well-known standard objects are standard.
    """
    if not object_name:
        return False
    if namespace:
        return True
    if has_custom_suffix(object_name):
        return True
    return object_name not in STANDARD_OBJECTS


def infer_is_custom(component: 'Component') -> bool:
    """
    Infer whether a component is user-defined from type, namespace and name

    Args:
        component: The component to check

    Returns:
        True if the component is custom (or from a managed package)
    """
    component_type = getattr(component.type, 'value', component.type)

    if component_type == 'object':
        return is_custom_object_name(component.api_name, component.namespace)

    if component_type == 'field':
        return has_custom_suffix(get_field_local_name(component.api_name))

    # Apex, LWC, triggers, Visualforce and flows are never "standard"
    return True
