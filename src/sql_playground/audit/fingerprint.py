"""Query fingerprint used to group audit records in analytics."""


def _rolling_hash(text: str) -> int:
    # 31-multiplier rolling hash over UTF-16 code units, wrapped to signed 32-bit
    data = text.encode("utf-16-le", errors="surrogatepass")
    value = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def query_fingerprint(query_text: str) -> str:
    """
    Deterministic, non-cryptographic fingerprint of a query.

    Case and surrounding whitespace do not change the result. Collisions are
    possible; the value is a join key for analytics, not an integrity check.
    """
    return format(abs(_rolling_hash(query_text.strip().lower())), "08x")
