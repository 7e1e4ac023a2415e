"""
Test resource registry and inference of resource classes from names.
"""

from pytest import raises

from resourcecraft import Attribute, Resource, config, resource_class
from resourcecraft.exceptions import InferenceError, SchemaConstructionError
from resourcecraft.inferring import (
    get_namespace,
    infer_resource_class,
    lookup_resource,
    register_resource,
    resolve_resource,
)


class WidgetResource(Resource):
    id = Attribute()


class GadgetSerializer(Resource):
    id = Attribute()


class GizmoResource(Resource):
    id = Attribute()


class GizmoSerializer(Resource):
    id = Attribute()


class Admin:
    class ToolResource(Resource):
        id = Attribute()
        admin = Attribute(lambda _: True)


class ToolResource(Resource):
    id = Attribute()


AnonymousWidgetResource = resource_class(lambda r: r.attributes("id"))


def test_infer():
    """
    Test inferring resource class, trying the "Resource" suffix before
    "Serializer".
    """
    config.inflector = "default"

    assert infer_resource_class("widgets") is WidgetResource
    assert infer_resource_class("widget") is WidgetResource
    assert infer_resource_class("Widget") is WidgetResource
    assert infer_resource_class("gadgets") is GadgetSerializer
    assert infer_resource_class("gizmos") is GizmoResource

    with raises(InferenceError, match="SprocketResource, SprocketSerializer"):
        infer_resource_class("sprockets")


def test_infer_disabled():
    with raises(InferenceError, match="Inference is disabled"):
        infer_resource_class("widgets")


def test_infer_nesting():
    """
    Test resource classes in the given namespace take precedence.
    """
    config.inflector = "default"

    assert infer_resource_class("tools", nesting=f"{__name__}.Admin") is (
        Admin.ToolResource
    )
    assert infer_resource_class("tools") is ToolResource

    # falls back to global lookup
    assert infer_resource_class("widgets", nesting=f"{__name__}.Admin") is (
        WidgetResource
    )


def test_lookup():
    assert lookup_resource("WidgetResource") is WidgetResource
    assert lookup_resource(f"{__name__}.WidgetResource") is WidgetResource
    assert lookup_resource("Admin.ToolResource") is Admin.ToolResource
    assert lookup_resource("ToolResource", nesting=f"{__name__}.Admin") is (
        Admin.ToolResource
    )
    assert lookup_resource("NonexistentResource") is None

    # anonymous resources are not registered
    assert lookup_resource("AnonymousResource") is None

    register_resource(WidgetResource, "Thingamajig")
    assert lookup_resource("Thingamajig") is WidgetResource


def test_resolve():
    """
    Test resolving resource class from class, name, or import path.
    """
    assert resolve_resource(WidgetResource) is WidgetResource
    assert resolve_resource("WidgetResource") is WidgetResource
    assert resolve_resource(f"{__name__}.AnonymousWidgetResource") is (
        AnonymousWidgetResource
    )

    with raises(SchemaConstructionError, match="not a Resource subclass"):
        resolve_resource(int)

    with raises(SchemaConstructionError, match="not found"):
        resolve_resource("SprocketResource")

    with raises(SchemaConstructionError, match="not found"):
        resolve_resource("nonexistent_module.SprocketResource")

    with raises(SchemaConstructionError):
        resolve_resource(123)


def test_namespace():
    assert get_namespace(WidgetResource) == __name__
    assert get_namespace(Admin.ToolResource) == f"{__name__}.Admin"

    class LocalResource(Resource):
        pass

    assert get_namespace(LocalResource) == __name__
