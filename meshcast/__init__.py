"""Building blocks for topic-based publish/subscribe overlays: backoff, blacklists,
RPC types and framing, gossip promise tracking, flood routing and discovery helpers."""

__version__ = "0.1.0"
__all__ = ["backoff", "blacklist", "rpc", "gossip_tracer", "floodsub", "discovery"]