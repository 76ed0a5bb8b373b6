OPENERS = ("{", "[")
CLOSERS = ("}", "]")


def extract_json(text: str) -> str:
    """Best-effort: cut from the first opening bracket to the last closing one.

    Surrounding prose and markdown fences are dropped. Without an opening or a
    closing bracket the stripped input comes back unchanged. Whether the result
    actually parses is left to the caller.
    """
    t = (text or "").strip()
    starts = [i for i in (t.find(ch) for ch in OPENERS) if i != -1]
    end = max(t.rfind(ch) for ch in CLOSERS)
    if not starts or end == -1:
        return t
    return t[min(starts):end + 1]
