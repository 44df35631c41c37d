import pytest

from meshcast.rpc import (
    RPC,
    ControlGraft,
    ControlIHave,
    ControlIWant,
    ControlPrune,
    ControlIDontWant,
    ControlMessage,
    Message,
    SubOpts,
    copy_rpc,
    encode_frame,
    hello_packet,
    iter_frames,
    rpc_with_control,
    rpc_with_messages,
    rpc_with_subs,
)


def test_rpc_with_subs():
    a = SubOpts(subscribe=True, topicid="a")
    b = SubOpts(subscribe=False, topicid="b")
    rpc = rpc_with_subs(a, b)
    assert rpc.subscriptions == [a, b]
    assert rpc.publish == []
    assert rpc.control is None


def test_rpc_with_messages():
    m = Message(data=b"blah", topic="topic1")
    rpc = rpc_with_messages(m)
    assert rpc.publish == [m]
    assert rpc.subscriptions == []


def test_rpc_with_control():
    iwant = [ControlIWant(message_ids=["x"])]
    graft = [ControlGraft(topic_id="t")]
    rpc = rpc_with_control(None, None, iwant, graft, None, None)
    assert rpc.publish == []
    assert rpc.control == ControlMessage(iwant=iwant, graft=graft)


def test_rpc_with_control_all_fields():
    ihave = [ControlIHave(topic_id="t", message_ids=["a"])]
    prune = [ControlPrune(topic_id="t")]
    idw = [ControlIDontWant(message_ids=["z"])]
    msgs = [Message(data=b"d")]
    rpc = rpc_with_control(msgs, ihave, [], [], prune, idw)
    assert rpc.publish == msgs
    assert rpc.control.ihave == ihave
    assert rpc.control.prune == prune
    assert rpc.control.idontwant == idw


def test_copy_rpc_has_independent_control():
    original = rpc_with_control(None, None, None, [ControlGraft(topic_id="t")], None, None)
    dup = copy_rpc(original)
    dup.control.graft = []
    assert original.control.graft == [ControlGraft(topic_id="t")]
    assert dup.control is not original.control


def test_copy_rpc_without_control():
    original = rpc_with_messages(Message(data=b"x"))
    dup = copy_rpc(original)
    assert dup == original
    assert dup.control is None


def test_hello_packet_unions_topics():
    rpc = hello_packet(["a", "b"], ["b", "c"])
    topics = sorted(s.topicid for s in rpc.subscriptions)
    assert topics == ["a", "b", "c"]
    assert all(s.subscribe is True for s in rpc.subscriptions)


def test_hello_packet_empty():
    assert hello_packet([], []) == RPC()


def test_encode_frame_short_prefix():
    assert encode_frame(b"hi") == b"\x02hi"


def test_encode_frame_multibyte_prefix():
    frame = encode_frame(b"a" * 300)
    assert frame[:2] == b"\xac\x02"
    assert len(frame) == 302


def test_frames_round_trip():
    payloads = [b"one", b"x" * 200, b"three"]
    data = b"".join(encode_frame(p) for p in payloads)
    assert list(iter_frames(data, 1 << 20)) == payloads


def test_empty_frames_are_skipped():
    data = encode_frame(b"") + encode_frame(b"a") + encode_frame(b"")
    assert list(iter_frames(data, 10)) == [b"a"]


def test_frame_too_large():
    with pytest.raises(ValueError):
        list(iter_frames(encode_frame(b"x" * 11), 10))


def test_truncated_frame():
    with pytest.raises(ValueError):
        list(iter_frames(encode_frame(b"hello")[:-1], 100))


def test_truncated_varint():
    with pytest.raises(ValueError):
        list(iter_frames(b"\x80", 100))