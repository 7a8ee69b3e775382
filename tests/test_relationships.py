"""Follow graph and feed tests."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from microblog.errors import RecordInvalid
from microblog.models import Relationship, User


@pytest.fixture
def saved_user(user, user_service):
    return user_service.save_or_raise(user)


@pytest.fixture
def other_user(make_user):
    return make_user()


@pytest.fixture
def following(saved_user, other_user, user_service):
    """``saved_user`` follows ``other_user``."""
    return user_service.follow(saved_user, other_user)


def _relationship_rows(db, follower: User, followed: User) -> int:
    return (
        db.query(Relationship)
        .filter(
            Relationship.follower_id == follower.id,
            Relationship.followed_id == followed.id,
        )
        .count()
    )


def test_follow(saved_user, other_user, user_service, following):
    """Test following another user."""
    assert user_service.is_following(saved_user, other_user)
    assert other_user in saved_user.followed_users
    assert following.follower is saved_user
    assert following.followed is other_user


def test_followed_user_has_follower(saved_user, other_user, following):
    """Test the followed user sees the follower."""
    assert saved_user in other_user.followers


def test_following_is_directional(saved_user, other_user, user_service, following):
    """Test following is not mutual."""
    assert not user_service.is_following(other_user, saved_user)
    assert saved_user not in other_user.followed_users
    assert other_user not in saved_user.followers


def test_unfollow(saved_user, other_user, user_service, following):
    """Test unfollowing reverses a follow."""
    user_service.unfollow(saved_user, other_user)

    assert not user_service.is_following(saved_user, other_user)
    assert other_user not in saved_user.followed_users
    assert saved_user not in other_user.followers


def test_unfollow_when_not_following(saved_user, other_user, user_service, db):
    """Test unfollowing someone not followed is a no-op."""
    user_service.unfollow(saved_user, other_user)
    assert db.query(Relationship).count() == 0


def test_follow_twice_keeps_one_row(saved_user, other_user, user_service, following, db):
    """Test following again returns the existing relationship."""
    again = user_service.follow(saved_user, other_user)

    assert again is following
    assert _relationship_rows(db, saved_user, other_user) == 1


def test_follow_requires_saved_users(saved_user, user_service):
    """Test both ends must be persisted."""
    unsaved = User(name="Unsaved", email="unsaved@example.com")
    with pytest.raises(RecordInvalid) as exc_info:
        user_service.follow(saved_user, unsaved)
    assert "followed_id" in exc_info.value.errors


def test_duplicate_relationship_rejected_by_database(saved_user, other_user, following, db):
    """Test the unique constraint on the ordered pair."""
    db.add(Relationship(follower_id=saved_user.id, followed_id=other_user.id))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_relationships_collections(saved_user, other_user, following):
    """Test the association rows from both ends."""
    assert saved_user.relationships == [following]
    assert other_user.reverse_relationships == [following]


def test_destroy_user_destroys_relationship(saved_user, other_user, user_service, following, db):
    """Test destroying the follower removes the relationship row."""
    follower_id, followed_id = saved_user.id, other_user.id

    user_service.destroy(saved_user)

    assert (
        db.query(Relationship)
        .filter(Relationship.follower_id == follower_id, Relationship.followed_id == followed_id)
        .count()
        == 0
    )
    assert other_user.followers == []


def test_destroy_other_user_destroys_relationship(
    saved_user, other_user, user_service, following, db
):
    """Test destroying the followed user removes the relationship row."""
    follower_id, followed_id = saved_user.id, other_user.id

    user_service.destroy(other_user)

    assert (
        db.query(Relationship)
        .filter(Relationship.follower_id == follower_id, Relationship.followed_id == followed_id)
        .count()
        == 0
    )
    assert saved_user.followed_users == []


def test_feed(saved_user, make_user, user_service, micropost_service):
    """Test the feed holds own and followed posts only, newest first."""
    older_micropost = micropost_service.create(
        saved_user, "Older post", created_at=datetime.now(UTC) - timedelta(days=1)
    )
    newer_micropost = micropost_service.create(
        saved_user, "Newer post", created_at=datetime.now(UTC) - timedelta(hours=1)
    )
    unfollowed_post = micropost_service.create(make_user(), "Not followed")
    followed_user = make_user()

    user_service.follow(saved_user, followed_user)
    followed_posts = [micropost_service.create(followed_user, "Lorem ipsum") for _ in range(3)]

    feed = user_service.feed(saved_user)

    assert newer_micropost in feed
    assert older_micropost in feed
    assert unfollowed_post not in feed
    for micropost in followed_posts:
        assert micropost in feed
    assert len(feed) == 5
    assert feed[-2:] == [newer_micropost, older_micropost]


def test_feed_after_unfollow(saved_user, other_user, user_service, micropost_service, following):
    """Test posts of an unfollowed user leave the feed."""
    post = micropost_service.create(other_user, "Lorem ipsum")
    assert post in user_service.feed(saved_user)

    user_service.unfollow(saved_user, other_user)

    assert post not in user_service.feed(saved_user)


def test_feed_without_follows(saved_user, user_service, micropost_service):
    """Test a user following nobody sees only their own posts."""
    post = micropost_service.create(saved_user, "Just me")
    assert user_service.feed(saved_user) == [post]
