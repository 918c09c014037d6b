"""
End-to-end tests through the HTTP API.
"""

from defis.models.challenge import Category, Difficulty


def create_profile(client, auth_headers, user_id):
    response = client.post("/profile", json={"username": user_id}, headers=auth_headers(user_id))
    assert response.status_code == 201
    return response.json()


class TestAuth:

    def test_missing_token(self, client):
        assert client.get("/profile/me").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/profile/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401


class TestProfileApi:

    def test_create_and_read_profile(self, client, auth_headers):
        created = create_profile(client, auth_headers, "alice")

        me = client.get("/profile/me", headers=auth_headers("alice")).json()

        assert me["id"] == "alice"
        assert me["level"] == 1
        assert me["points_to_next_level"] == 100
        assert me["partner_code"] == created["partner_code"]
        assert len(me["referral_code"]) == 8

    def test_duplicate_profile_conflict(self, client, auth_headers):
        create_profile(client, auth_headers, "alice")

        response = client.post("/profile", json={"username": "alice"}, headers=auth_headers("alice"))

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict"

    def test_referral_code(self, client, auth_headers):
        alice = create_profile(client, auth_headers, "alice")

        response = client.post(
            "/profile",
            json={"username": "bob", "referral_code": alice["referral_code"]},
            headers=auth_headers("bob"),
        )

        assert response.status_code == 201

    def test_pair_and_unpair(self, client, auth_headers):
        create_profile(client, auth_headers, "alice")
        bob = create_profile(client, auth_headers, "bob")

        response = client.post("/profile/partner", json={"partner_code": bob["partner_code"]}, headers=auth_headers("alice"))
        assert response.status_code == 200
        assert response.json()["id"] == "bob"
        assert client.get("/profile/me", headers=auth_headers("bob")).json()["partner_id"] == "alice"

        assert client.delete("/profile/partner", headers=auth_headers("bob")).status_code == 204
        assert client.get("/profile/me", headers=auth_headers("alice")).json()["partner_id"] is None

    def test_self_pairing_is_bad_request(self, client, auth_headers):
        alice = create_profile(client, auth_headers, "alice")

        response = client.post("/profile/partner", json={"partner_code": alice["partner_code"]}, headers=auth_headers("alice"))

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_operation"

    def test_unknown_partner_code(self, client, auth_headers):
        create_profile(client, auth_headers, "alice")

        response = client.post("/profile/partner", json={"partner_code": "ZZZZZZZZ"}, headers=auth_headers("alice"))

        assert response.status_code == 404


class TestExchangeApi:

    def test_full_exchange(self, client, auth_headers, make_challenge):
        challenge = make_challenge(category=Category.SPORT, difficulty=Difficulty.FACILE, points_reward=40)
        create_profile(client, auth_headers, "alice")
        bob = create_profile(client, auth_headers, "bob")
        client.post("/profile/partner", json={"partner_code": bob["partner_code"]}, headers=auth_headers("alice"))

        sent = client.post(
            "/sent-challenges",
            json={"category": "sport", "difficulty": "facile"},
            headers=auth_headers("alice"),
        )
        assert sent.status_code == 201
        sent_id = sent.json()["id"]
        assert client.get("/sent-challenges/pending-count", headers=auth_headers("bob")).json() == {"pending": 1}

        accepted = client.put(f"/sent-challenges/{sent_id}/accept", headers=auth_headers("bob"))
        assert accepted.status_code == 200
        assert accepted.json()["challenge_id"] == challenge.id

        completed = client.put(f"/sent-challenges/{sent_id}/complete", json={"rating": 5}, headers=auth_headers("bob"))
        assert completed.status_code == 200
        assert completed.json()["points_awarded"] == 40

        again = client.put(f"/sent-challenges/{sent_id}/complete", headers=auth_headers("bob"))
        assert again.json()["already_completed"] is True
        assert client.get("/profile/me", headers=auth_headers("bob")).json()["points"] == 40

        stats = client.get("/profile/me/stats", headers=auth_headers("bob")).json()
        assert stats["completed_count"] == 1
        assert stats["partner"]["id"] == "alice"

    def test_no_available_challenge(self, client, auth_headers):
        create_profile(client, auth_headers, "alice")
        bob = create_profile(client, auth_headers, "bob")
        client.post("/profile/partner", json={"partner_code": bob["partner_code"]}, headers=auth_headers("alice"))
        sent_id = client.post(
            "/sent-challenges",
            json={"category": "culture", "difficulty": "difficile"},
            headers=auth_headers("alice"),
        ).json()["id"]

        response = client.put(f"/sent-challenges/{sent_id}/accept", headers=auth_headers("bob"))

        assert response.status_code == 422
        assert response.json()["kind"] == "not_available"

    def test_preferences_gate(self, client, auth_headers, make_challenge):
        make_challenge(category=Category.COQUIN)
        create_profile(client, auth_headers, "alice")
        bob = create_profile(client, auth_headers, "bob")
        client.post("/profile/partner", json={"partner_code": bob["partner_code"]}, headers=auth_headers("alice"))
        updated = client.put(
            "/preferences",
            json={"mode": "categories", "allowed_categories": ["romantique"], "allowed_difficulties": ["facile"]},
            headers=auth_headers("bob"),
        )
        assert updated.status_code == 200
        sent_id = client.post(
            "/sent-challenges",
            json={"category": "coquin", "difficulty": "facile"},
            headers=auth_headers("alice"),
        ).json()["id"]

        response = client.put(f"/sent-challenges/{sent_id}/accept", headers=auth_headers("bob"))

        assert response.status_code == 403
        assert response.json()["kind"] == "policy_denied"

    def test_unpaired_send(self, client, auth_headers):
        create_profile(client, auth_headers, "alice")

        response = client.post(
            "/sent-challenges",
            json={"category": "sport", "difficulty": "facile"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 400


class TestCommunityApi:

    def test_propose_vote_and_list(self, client, auth_headers):
        create_profile(client, auth_headers, "alice")
        proposed = client.post(
            "/challenges/propose",
            json={"title": "Karaoké", "description": "Chantez en duo", "category": "creatif", "difficulty": "moyen"},
            headers=auth_headers("alice"),
        )
        assert proposed.status_code == 201
        challenge_id = proposed.json()["id"]
        assert proposed.json()["points_reward"] == 20

        voted = client.post(f"/challenges/{challenge_id}/vote", json={"vote_type": "up"}, headers=auth_headers("alice"))
        assert voted.json() == {"challenge_id": challenge_id, "vote_type": "up", "votes_count": 1}

        community = client.get("/challenges/community", headers=auth_headers("alice")).json()
        assert community[0]["user_vote"] == "up"

        # Not approved yet, so absent from the catalog
        assert client.get("/challenges", headers=auth_headers("alice")).json() == []

    def test_rewards_listing(self, client, auth_headers, make_reward):
        make_reward("Premier pas", 10)
        create_profile(client, auth_headers, "alice")

        rewards = client.get("/rewards", headers=auth_headers("alice")).json()

        assert rewards[0]["name"] == "Premier pas"
        assert rewards[0]["unlocked"] is False
