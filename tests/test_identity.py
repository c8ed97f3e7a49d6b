from services import IdentityResolver, UNKNOWN_USER, create_user


def test_resolve_formats_username_and_name(db) -> None:
    user = create_user(db, "alice", "Alice", "Adams")
    resolver = IdentityResolver(db)

    assert resolver.resolve(user.ui_id) == "alice (Alice Adams)"
    assert resolver.resolve(str(user.ui_id)) == "alice (Alice Adams)"


def test_resolve_caches_per_resolver(db) -> None:
    user = create_user(db, "bob", "Bob", "Brown")
    resolver = IdentityResolver(db)

    for _ in range(3):
        resolver.resolve(user.ui_id)

    assert resolver.lookups == 1
    assert IdentityResolver(db).lookups == 0


def test_unknown_and_non_numeric_ids(db) -> None:
    resolver = IdentityResolver(db)

    assert resolver.resolve(None) == UNKNOWN_USER
    assert resolver.resolve("") == UNKNOWN_USER
    assert resolver.resolve("abc") == UNKNOWN_USER
    assert resolver.resolve(True) == UNKNOWN_USER
    assert resolver.lookups == 0

    assert resolver.resolve(999) == UNKNOWN_USER
    assert resolver.resolve(999) == UNKNOWN_USER
    assert resolver.lookups == 1


def test_missing_names_render_as_blank(db) -> None:
    user = create_user(db, "svc")

    assert IdentityResolver(db).resolve(user.ui_id) == "svc ( )"


def test_resolve_username(db) -> None:
    create_user(db, "carol", "Carol", "Clark")
    resolver = IdentityResolver(db)

    assert resolver.resolve_username("carol") == "carol (Carol Clark)"
    assert resolver.resolve_username("nobody") == UNKNOWN_USER
    assert resolver.resolve_username(None) == UNKNOWN_USER
