from strawberry.extensions import SchemaExtension

from events_api.schema import schema


def test_extensions_are_built_per_request():
    assert schema.extensions
    assert not any(isinstance(extension, SchemaExtension) for extension in schema.extensions)
    assert all(callable(extension) for extension in schema.extensions)
