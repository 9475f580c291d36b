from conftest import auth, count_rows

from beauty_directory.models import Message, Notification


def test_send_message_and_read_conversation(client, make_profile):
    alice = make_profile("alice_a", user_id="user_alice")
    bob = make_profile("bob_b", user_id="user_bob")

    res = client.post("/api/messages", json={"receiverId": bob, "content": "  Hi Bob  "}, headers=auth("user_alice"))
    assert res.status_code == 201
    body = res.json()
    assert body["senderId"] == alice
    assert body["receiverId"] == bob
    assert body["content"] == "Hi Bob"
    assert body["read"] is False

    client.post("/api/messages", json={"receiverId": alice, "content": "Hey Alice"}, headers=auth("user_bob"))

    res = client.get("/api/messages", params={"otherUserId": bob}, headers=auth("user_alice"))
    assert [m["content"] for m in res.json()] == ["Hi Bob", "Hey Alice"]


def test_fetching_conversation_marks_incoming_read(client, make_profile, make_message):
    alice = make_profile("reader_a", user_id="user_reader")
    bob = make_profile("writer_b")
    make_message(bob, alice, "unread one")
    make_message(alice, bob, "my own")

    client.get("/api/messages", params={"otherUserId": bob}, headers=auth("user_reader"))

    assert count_rows(Message, receiver_id=alice, read=False) == 0
    # Outgoing messages stay unread until the partner opens the thread
    assert count_rows(Message, receiver_id=bob, read=False) == 1


def test_empty_message_is_rejected(client, make_profile):
    make_profile("quiet_a", user_id="user_quiet")
    bob = make_profile("quiet_b")
    res = client.post("/api/messages", json={"receiverId": bob, "content": "   "}, headers=auth("user_quiet"))
    assert res.status_code == 400
    assert count_rows(Message) == 0


def test_message_to_missing_profile_is_404(client, make_profile):
    make_profile("lost_a", user_id="user_lost")
    res = client.post("/api/messages", json={"receiverId": 999, "content": "hello?"}, headers=auth("user_lost"))
    assert res.status_code == 404


def test_message_creates_notification_for_receiver(client, make_profile):
    make_profile("notify_a", user_id="user_notify")
    bob = make_profile("notify_b")

    client.post("/api/messages", json={"receiverId": bob, "content": "ping"}, headers=auth("user_notify"))

    assert count_rows(Notification, profile_id=bob, type="message") == 1


def test_self_message_creates_no_notification(client, make_profile):
    me = make_profile("note_to_self", user_id="user_self")
    res = client.post("/api/messages", json={"receiverId": me, "content": "remember"}, headers=auth("user_self"))
    assert res.status_code == 201
    assert count_rows(Notification) == 0


def test_all_messages_for_user(client, make_profile, make_message):
    alice = make_profile("all_a", user_id="user_all")
    bob = make_profile("all_b")
    carol = make_profile("all_c")
    make_message(alice, bob)
    make_message(carol, alice)
    make_message(bob, carol)

    res = client.get("/api/messages", headers=auth("user_all"))
    assert len(res.json()) == 2


def test_delete_message_requires_participant(client, make_profile, make_message):
    alice = make_profile("del_a", user_id="user_del_a")
    bob = make_profile("del_b", user_id="user_del_b")
    make_profile("del_c", user_id="user_del_c")
    message_id = make_message(alice, bob)

    assert client.delete(f"/api/messages/{message_id}", headers=auth("user_del_c")).status_code == 403
    assert client.delete(f"/api/messages/{message_id}", headers=auth("user_del_b")).status_code == 204
    assert client.delete(f"/api/messages/{message_id}", headers=auth("user_del_a")).status_code == 404


def test_delete_conversation_removes_only_that_pair(client, make_profile, make_message):
    alice = make_profile("conv_a", user_id="user_conv")
    bob = make_profile("conv_b")
    carol = make_profile("conv_c")
    make_message(alice, bob)
    make_message(bob, alice)
    make_message(alice, carol)
    make_message(carol, bob)

    res = client.delete(f"/api/messages/conversation/{bob}", headers=auth("user_conv"))
    assert res.status_code == 204

    assert count_rows(Message, sender_id=alice, receiver_id=bob) == 0
    assert count_rows(Message, sender_id=bob, receiver_id=alice) == 0
    assert count_rows(Message, sender_id=alice, receiver_id=carol) == 1
    assert count_rows(Message, sender_id=carol, receiver_id=bob) == 1


def test_conversation_list_after_first_message(client, make_profile):
    make_profile("inbox_one", user_id="user_inbox_one")
    two = make_profile("inbox_two")

    client.post("/api/messages", json={"receiverId": two, "content": "hello"}, headers=auth("user_inbox_one"))

    res = client.get("/api/messages/conversations", headers=auth("user_inbox_one"))
    assert res.status_code == 200
    conversations = res.json()
    assert len(conversations) == 1
    assert conversations[0]["partnerId"] == two
    assert conversations[0]["lastMessage"]["content"] == "hello"
    assert conversations[0]["unreadCount"] == 0


def test_messages_require_authentication(client):
    assert client.get("/api/messages").status_code == 401
