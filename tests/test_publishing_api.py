from fakes import script_facebook_reel, script_instagram_reel, ok
from promojour.models.db import PublicationHistory
from promojour.models.db.enums import PublicationStatus, SocialPlatform


def _payload(promotion, store, platforms=("facebook",), **extra):
    return {"promotion_id": promotion.id, "store_id": store.id, "platforms": list(platforms), **extra}


def test_publish_reel_endpoint(client, auth_headers, override_graph_client, db_session,
                               campaign_factory, promotion_factory, store_factory, connection_factory):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    connection_factory(store, SocialPlatform.FACEBOOK)
    connection_factory(store, SocialPlatform.INSTAGRAM)
    promo = promotion_factory(campaign)
    script_facebook_reel(script_instagram_reel(override_graph_client))

    resp = client.post(
        "/api/v1/publishing/reel",
        json=_payload(promo, store, ("facebook", "instagram"), campaign_id=campaign.id),
        headers=auth_headers,
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["success"] is True
    assert {r["platform"]: r["post_id"] for r in body["results"]} == {"facebook": "fb-post-1", "instagram": "ig-post-1"}
    assert body["promotion_url"].endswith(f"/magasin/{store.id}/{promo.id}")
    assert db_session.query(PublicationHistory).filter_by(campaign_id=campaign.id).count() == 2


def test_publish_post_endpoint_uses_image(client, auth_headers, override_graph_client,
                                          campaign_factory, promotion_factory, store_factory, connection_factory):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    connection_factory(store, SocialPlatform.FACEBOOK)
    promo = promotion_factory(campaign, video_url=None)
    override_graph_client.on("POST", "page-1/photos", ok(id="photo-1", post_id="page-1_9"))

    resp = client.post("/api/v1/publishing/post", json=_payload(promo, store), headers=auth_headers)

    assert resp.status_code == 200, resp.text
    assert resp.json()["results"][0]["post_id"] == "page-1_9"
    assert override_graph_client.calls_to("page-1/photos")[0][2]["params"]["url"] == promo.image_url


def test_publish_reel_without_video_is_rejected(client, auth_headers, override_graph_client,
                                                campaign_factory, promotion_factory, store_factory, connection_factory):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    connection_factory(store, SocialPlatform.FACEBOOK)
    promo = promotion_factory(campaign, video_url=None)

    resp = client.post("/api/v1/publishing/reel", json=_payload(promo, store), headers=auth_headers)

    assert resp.status_code == 400
    assert "no video" in resp.json()["message"]


def test_publish_without_connection_is_rejected(client, auth_headers, override_graph_client, db_session,
                                                campaign_factory, promotion_factory, store_factory):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    promo = promotion_factory(campaign)

    resp = client.post("/api/v1/publishing/reel", json=_payload(promo, store), headers=auth_headers)

    assert resp.status_code == 400
    assert db_session.query(PublicationHistory).count() == 0


def test_publish_unknown_promotion_is_404(client, auth_headers, override_graph_client, store_factory):
    store = store_factory()
    resp = client.post(
        "/api/v1/publishing/reel",
        json={"promotion_id": "missing", "store_id": store.id, "platforms": ["facebook"]},
        headers=auth_headers,
    )
    assert resp.status_code == 404


def test_publish_requires_service_role(client, override_graph_client):
    resp = client.post("/api/v1/publishing/reel", json={"promotion_id": "x", "store_id": "y", "platforms": ["facebook"]})
    assert resp.status_code == 401


def test_publish_rejects_unknown_platform(client, auth_headers, override_graph_client):
    resp = client.post(
        "/api/v1/publishing/reel",
        json={"promotion_id": "x", "store_id": "y", "platforms": ["tiktok"]},
        headers=auth_headers,
    )
    assert resp.status_code == 422


def test_publication_history_endpoint_filters(client, auth_headers, db_session,
                                              campaign_factory, promotion_factory, store_factory):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    promo = promotion_factory(campaign)
    for platform, status in [
        (SocialPlatform.FACEBOOK, PublicationStatus.SUCCESS),
        (SocialPlatform.INSTAGRAM, PublicationStatus.ERROR),
    ]:
        db_session.add(PublicationHistory(
            promotion_id=promo.id, store_id=store.id, campaign_id=campaign.id,
            platform=platform, status=status,
        ))
    db_session.commit()

    resp = client.get(
        "/api/v1/publication-history",
        params={"store_id": store.id, "status": "error"},
        headers=auth_headers,
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["platform"] == "instagram"
    assert body["items"][0]["status"] == "error"


def test_publish_with_unknown_campaign_is_404_before_any_graph_call(
    client, auth_headers, override_graph_client, db_session,
    campaign_factory, promotion_factory, store_factory, connection_factory,
):
    campaign = campaign_factory()
    store = store_factory(campaign.organization)
    connection_factory(store, SocialPlatform.FACEBOOK)
    connection_factory(store, SocialPlatform.INSTAGRAM)
    promo = promotion_factory(campaign)
    script_facebook_reel(script_instagram_reel(override_graph_client))

    resp = client.post(
        "/api/v1/publishing/reel",
        json=_payload(promo, store, ("facebook", "instagram"), campaign_id="no-such-campaign"),
        headers=auth_headers,
    )

    assert resp.status_code == 404
    assert resp.json()["message"] == "Campaign not found"
    assert override_graph_client.calls == []
    assert db_session.query(PublicationHistory).count() == 0


def test_publish_with_campaign_of_another_promotion_is_rejected(
    client, auth_headers, override_graph_client, db_session,
    campaign_factory, promotion_factory, store_factory, connection_factory,
):
    campaign = campaign_factory()
    other = campaign_factory(campaign.organization)
    store = store_factory(campaign.organization)
    connection_factory(store, SocialPlatform.FACEBOOK)
    promo = promotion_factory(campaign)
    script_facebook_reel(override_graph_client)

    resp = client.post(
        "/api/v1/publishing/reel",
        json=_payload(promo, store, campaign_id=other.id),
        headers=auth_headers,
    )

    assert resp.status_code == 400
    assert override_graph_client.calls == []
    assert db_session.query(PublicationHistory).count() == 0
