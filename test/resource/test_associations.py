"""
Test associations with nested resources.
"""

from dataclasses import dataclass, field

from pytest import raises

from resourcecraft import (
    Attribute,
    Many,
    One,
    Resource,
    ResourceConfig,
    attribute,
    config,
    resource_class,
)
from resourcecraft.exceptions import (
    AttributeEvaluationError,
    SchemaConstructionError,
    TypeCheckFailure,
)


@dataclass
class Post:
    title: str
    published: bool = True


@dataclass
class Profile:
    bio: str


@dataclass
class Author:
    id: int
    name: str
    posts: list[Post] = field(default_factory=list)
    profile: Profile | None = None


class PostResource(Resource):
    title = Attribute()


class ProfileResource(Resource):
    bio = Attribute()


class AuthorResource(Resource):
    resource_config = ResourceConfig(root_key="author")

    id = Attribute()
    posts = Many(PostResource)
    profile = One(ProfileResource)


class PublishedAuthorResource(Resource):
    id = Attribute()
    posts = Many(PostResource, condition=lambda post: post.published)


class OtherPostsResource(Resource):
    posts = Many(PostResource, condition=lambda post, author: post.title != author.name)


class StrictPostResource(Resource):
    title = Attribute(type="Integer")


class StrictAuthorResource(Resource):
    posts = Many(StrictPostResource)


class LenientAuthorResource(Resource):
    resource_config = ResourceConfig(on_error="nullify")

    id = Attribute()
    posts = Many(StrictPostResource)


class GreetingPostResource(Resource):
    @attribute
    def greeting(self, post: Post) -> str:
        return f"{self.params['greeting']}, {post.title}"


class GreetingAuthorResource(Resource):
    posts = Many(GreetingPostResource)


class Blog:
    class PostResource(Resource):
        title = Attribute()
        blog = Attribute(lambda _: True)

    class AuthorResource(Resource):
        posts = Many("PostResource")


def make_author(**kwargs) -> Author:
    return Author(
        1,
        "Masafumi",
        posts=[Post("Hello"), Post("Draft", published=False)],
        **kwargs,
    )


def test_many():
    assert AuthorResource(make_author()).to_dict() == {
        "author": {
            "id": 1,
            "posts": [{"title": "Hello"}, {"title": "Draft"}],
            "profile": None,
        }
    }
    assert AuthorResource(make_author(), params={}).serialize() == (
        '{"author":{"id":1,"posts":[{"title":"Hello"},{"title":"Draft"}],"profile":null}}'
    )


def test_one():
    author = make_author(profile=Profile("Rubyist"))

    assert AuthorResource(author).to_dict(root_key=False)["profile"] == {
        "bio": "Rubyist"
    }

    with raises(SchemaConstructionError, match="Condition"):
        One(ProfileResource, condition=lambda profile: True)


def test_condition():
    """
    Test filtering nested objects by condition.
    """
    author = make_author()

    assert PublishedAuthorResource(author).to_dict() == {
        "id": 1,
        "posts": [{"title": "Hello"}],
    }

    # all filtered out
    author.posts = [Post("Draft", published=False)]
    assert PublishedAuthorResource(author).to_dict() == {"id": 1, "posts": []}

    # condition taking the owning object
    author.posts = [Post("Masafumi"), Post("Hello")]
    assert OtherPostsResource(author).to_dict() == {"posts": [{"title": "Hello"}]}


def test_none():
    """
    Test None targets resolve to None and are subject to nil policy.
    """
    author = make_author()
    author.posts = None  # type: ignore

    assert AuthorResource(author).to_dict(root_key=False) == {
        "id": 1,
        "posts": None,
        "profile": None,
    }

    nil_cls = resource_class(
        lambda r: (r.configure(on_nil="none"), r.one("profile", ProfileResource))
    )
    assert nil_cls(author).to_dict() == {"profile": "none"}


def test_inline():
    """
    Test inline nested resources.
    """
    resource_cls = resource_class(
        lambda r: (
            r.attributes("id"),
            r.many("posts", lambda p: p.attributes("title", "published")),
            r.one("profile", body=lambda p: p.attributes("bio")),
        )
    )

    author = make_author(profile=Profile("Rubyist"))
    assert resource_cls(author).to_dict() == {
        "id": 1,
        "posts": [
            {"title": "Hello", "published": True},
            {"title": "Draft", "published": False},
        ],
        "profile": {"bio": "Rubyist"},
    }

    posts = resource_cls.resource_fields()["posts"]
    assert isinstance(posts, Many)
    assert posts.resource_cls.is_anonymous()

    with raises(SchemaConstructionError, match="both"):
        Many(lambda p: p.attributes("title"), body=lambda p: p.attributes("title"))


def test_source_and_key():
    resource_cls = resource_class(
        lambda r: (
            r.many("articles", PostResource, source="posts"),
            r.one("bio", ProfileResource, source=lambda a: a.profile, key="about"),
        )
    )

    author = make_author(profile=Profile("Rubyist"))
    assert resource_cls(author).to_dict() == {
        "articles": [{"title": "Hello"}, {"title": "Draft"}],
        "about": {"bio": "Rubyist"},
    }


def test_nesting():
    """
    Test resource names are resolved within the enclosing namespace first.
    """
    author = make_author()

    assert Blog.AuthorResource(author).to_dict() == {
        "posts": [{"title": "Hello", "blog": True}, {"title": "Draft", "blog": True}]
    }

    explicit = resource_class(
        lambda r: r.many("posts", "PostResource", nesting=f"{__name__}.Blog")
    )
    assert explicit(author).to_dict()["posts"][0] == {"title": "Hello", "blog": True}

    by_path = resource_class(
        lambda r: r.many("posts", f"{__name__}.PostResource")
    )
    assert by_path(author).to_dict()["posts"][0] == {"title": "Hello"}


def test_infer():
    """
    Test inferring nested resources from association names.
    """
    config.inflector = "default"

    class InferringAuthorResource(Resource):
        id = Attribute()
        posts = Many()
        profile = One()

    author = make_author(profile=Profile("Rubyist"))
    assert InferringAuthorResource(author).to_dict() == {
        "id": 1,
        "posts": [{"title": "Hello"}, {"title": "Draft"}],
        "profile": {"bio": "Rubyist"},
    }
    assert InferringAuthorResource.resource_fields()["posts"].resource_cls is (
        PostResource
    )


def test_infer_disabled():
    class UninferredAuthorResource(Resource):
        posts = Many()

    with raises(SchemaConstructionError, match="inference is disabled"):
        UninferredAuthorResource(make_author()).to_dict()

    # explicit resources are resolved when the inline resource is built
    with raises(SchemaConstructionError, match="not found"):
        resource_class(lambda r: r.many("posts", "MissingResource"))


def test_params():
    """
    Test params propagate to nested resources.
    """
    assert GreetingAuthorResource(make_author(), params={"greeting": "Hi"}).to_dict() == {
        "posts": [{"greeting": "Hi, Hello"}, {"greeting": "Hi, Draft"}]
    }


def test_errors():
    """
    Test errors in nested resources are located by path and subject to the owning
    resource's error policy.
    """
    with raises(TypeCheckFailure) as exc_info:
        StrictAuthorResource(make_author()).to_dict()

    assert exc_info.value.location == "posts[0].title"
    assert exc_info.value.resource_cls is StrictPostResource

    with raises(TypeCheckFailure) as exc_info:
        StrictAuthorResource([make_author(), make_author()]).to_dict()

    assert exc_info.value.location == "[0].posts[0].title"

    assert LenientAuthorResource(make_author()).to_dict() == {"id": 1, "posts": None}

    failing = resource_class(
        lambda r: r.many("posts", PostResource, source=lambda a: a.missing)
    )
    with raises(AttributeEvaluationError, match="AttributeError") as exc_info:
        failing(make_author()).to_dict()

    assert exc_info.value.path == ("posts",)


def test_many_not_collection():
    """
    Test a mapping is not iterated as a collection of keys.
    """
    resource_cls = resource_class(lambda r: r.many("posts", PostResource))
    record = {"posts": {"title": "Hello"}}

    with raises(AttributeEvaluationError, match="expects a collection") as exc_info:
        resource_cls(record).to_dict()

    assert exc_info.value.path == ("posts",)
    assert isinstance(exc_info.value.__cause__, TypeError)

    lenient = resource_class(
        lambda r: (r.configure(on_error="nullify"), r.many("posts", PostResource))
    )
    assert lenient(record).to_dict() == {"posts": None}
