"""
Persistence Exceptions
Raised by repositories; the dispatcher turns them into result errors
"""


class DomainException(Exception):
    """Base for failures raised below the handler layer"""
    pass


class RepositoryException(DomainException):
    """The store rejected or failed an operation"""
    pass


class ResourceNotFoundException(DomainException):
    """An update targeted a row that does not exist"""

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class DuplicateResourceException(DomainException):
    """A unique constraint was violated"""

    def __init__(self, resource_type: str, field: str, value: str):
        self.resource_type = resource_type
        self.field = field
        self.value = value
        super().__init__(f"{resource_type} with {field}='{value}' already exists")
