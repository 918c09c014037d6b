"""
Tests for the challenge catalog, community proposals and comments.
"""

import pytest

from defis.errors import InvalidOperation, NotFound, PolicyDenied
from defis.models.challenge import Category, Difficulty
from defis.models.challenge_vote import VoteType
from defis.services.catalog import (
    add_comment,
    approve_challenge,
    list_challenges,
    list_comments,
    list_community,
    propose_challenge,
)
from defis.services.voting import vote


class TestListChallenges:

    def test_filters_and_hides_unapproved(self, session, make_challenge):
        keep = make_challenge("Keep", Category.SPORT, Difficulty.MOYEN)
        make_challenge("Other category", Category.CULTURE, Difficulty.MOYEN)
        make_challenge("Unapproved", Category.SPORT, Difficulty.MOYEN, is_approved=False, is_community=True)

        result = list_challenges(session, Category.SPORT, Difficulty.MOYEN)

        assert [c.id for c in result] == [keep.id]

    def test_include_unapproved(self, session, make_challenge):
        make_challenge("Approved")
        make_challenge("Unapproved", is_approved=False, is_community=True)

        assert len(list_challenges(session, approved_only=False)) == 2


class TestProposals:

    def test_proposal_is_unapproved_community_challenge(self, session, make_profile):
        make_profile("alice")

        challenge = propose_challenge(
            session, "alice", "Pique-nique", "Pique-nique au parc", Category.AVENTURE, Difficulty.DIFFICILE
        )

        assert challenge.is_community is True
        assert challenge.is_approved is False
        assert challenge.created_by == "alice"
        assert challenge.points_reward == 30
        assert challenge.votes_count == 0

    def test_curator_approves(self, session, make_profile):
        make_profile("alice")
        make_profile("carol", is_curator=True)
        challenge = propose_challenge(session, "alice", "Karaoké", "Chantez en duo", Category.CREATIF, Difficulty.FACILE)

        approved = approve_challenge(session, "carol", challenge.id)

        assert approved.is_approved is True
        assert approved.id in [c.id for c in list_challenges(session)]

    def test_non_curator_cannot_approve(self, session, make_profile):
        make_profile("alice")
        challenge = propose_challenge(session, "alice", "Karaoké", "Chantez en duo", Category.CREATIF, Difficulty.FACILE)

        with pytest.raises(PolicyDenied):
            approve_challenge(session, "alice", challenge.id)

    def test_community_listing_carries_own_vote(self, session, make_profile):
        make_profile("alice")
        make_profile("bob")
        challenge = propose_challenge(session, "alice", "Karaoké", "Chantez en duo", Category.CREATIF, Difficulty.FACILE)
        vote(session, "bob", challenge.id, VoteType.UP)

        for_bob = list_community(session, "bob")
        for_alice = list_community(session, "alice")

        assert for_bob[0].user_vote == VoteType.UP
        assert for_bob[0].votes_count == 1
        assert for_alice[0].user_vote is None


class TestComments:

    def test_add_and_list(self, session, make_profile, make_challenge):
        make_profile("alice")
        challenge = make_challenge()

        comment = add_comment(session, "alice", challenge.id, "  Génial !  ")
        comments = list_comments(session, challenge.id)

        assert comment.content == "Génial !"
        assert [c.id for c in comments] == [comment.id]
        assert comments[0].author.username == "alice"

    def test_blank_comment_rejected(self, session, make_profile, make_challenge):
        make_profile("alice")
        challenge = make_challenge()

        with pytest.raises(InvalidOperation):
            add_comment(session, "alice", challenge.id, "   ")

    def test_comment_on_unknown_challenge(self, session, make_profile):
        make_profile("alice")

        with pytest.raises(NotFound):
            add_comment(session, "alice", 7, "Hello")
