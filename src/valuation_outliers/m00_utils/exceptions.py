"""
exceptions.py

Error types raised by the outlier detection and explanation modules.

Each one subclasses the builtin the rest of the toolkit already raises for the
same condition, so callers catching ValueError / KeyError keep working.
"""


class ConfigurationError(ValueError):
    """Detection configuration is unusable (empty attribute list, bad threshold, ...)."""


class PropertyNotFoundError(KeyError):
    """An outlier refers to a property id missing from the supplied collection."""

    def __init__(self, property_id):
        self.property_id = property_id
        super().__init__(f"Property with ID {property_id} not found")

    def __str__(self):
        return self.args[0]


class AttributeValueUnavailableError(ValueError):
    """The attribute an explanation depends on cannot be resolved for the property."""

    def __init__(self, attribute: str, property_id):
        self.attribute = attribute
        self.property_id = property_id
        super().__init__(f"Value for {attribute} is undefined for property {property_id}")
