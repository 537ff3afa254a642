from __future__ import annotations

from tests.fakes import auth


def test_members_chat_and_outsiders_are_forbidden(client, signup, make_study):
    _, owner_token = signup("owner@study.up")
    _, outsider_token = signup("outsider@study.up")
    sid = make_study(owner_token)["id"]

    posted = client.post(f"/api/studies/{sid}/messages", json={"text": "첫 메시지"}, headers=auth(owner_token))
    assert posted.status_code == 201
    assert posted.get_json()["text"] == "첫 메시지"

    blank = client.post(f"/api/studies/{sid}/messages", json={"text": "  "}, headers=auth(owner_token))
    assert blank.status_code == 400

    assert client.get(f"/api/studies/{sid}/messages", headers=auth(outsider_token)).status_code == 403
    assert client.post(f"/api/studies/{sid}/messages", json={"text": "x"}, headers=auth(outsider_token)).status_code == 403

    listed = client.get(f"/api/studies/{sid}/messages?limit=0", headers=auth(owner_token)).get_json()
    assert [m["text"] for m in listed] == ["첫 메시지"]


def test_my_chats(client, signup, make_study):
    _, token = signup("owner@study.up")
    sid = make_study(token, name="채팅방")["id"]

    chats = client.get("/api/studies/me/chats", headers=auth(token)).get_json()
    assert chats == [
        {
            "studyId": sid,
            "name": "채팅방",
            "description": "매주 두 문제",
            "memberCount": 1,
            "lastMessageAt": None,
            "status": "recruiting",
            "termType": "short",
            "startDate": None,
            "endDate": None,
        }
    ]
