from dataclasses import dataclass, field
from typing import Callable, Dict, List, Protocol
import http.client
import json
import logging
import socket
import time
import urllib.request
import urllib.error

from ..config import Settings
from .errors import GenerationTimeoutError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}
READ_CHUNK_BYTES = 64 * 1024


class TextGenerator(Protocol):
    """Anything that turns one instruction into one completion string."""

    def generate(self, prompt: str) -> str:
        ...


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return True
    reason = getattr(exc, "reason", None)
    return isinstance(reason, (socket.timeout, TimeoutError))


def _completion_text(data: dict) -> str:
    raw = ""
    try:
        choice0 = (data.get("choices") or [])[0]
        msg_obj = choice0.get("message") if isinstance(choice0, dict) else None
        raw = (msg_obj or {}).get("content") or ""
    except (IndexError, AttributeError, TypeError):
        raw = ""
    return raw if isinstance(raw, str) else ""


@dataclass
class ChatCompletionsGenerator:
    """OpenAI-compatible /chat/completions client.

    Sends the prompt as a single system message with pinned temperature and
    returns the first choice's content ("" when absent). Transport failures
    (network/TLS errors, broken HTTP framing, 429 and 5xx) are retried with
    exponential backoff. ``timeout_s`` bounds each socket operation and also
    the whole call, retries and body download included; running out of time
    is never retried.
    """

    provider: str
    api_key: str
    model: str
    base_url: str
    temperature: float = 0.0
    timeout_s: float = 20.0
    max_retries: int = 1
    backoff_s: float = 0.5
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    @property
    def endpoint(self) -> str:
        return self.base_url.rstrip("/") + "/chat/completions"

    def _build_request(self, prompt: str) -> urllib.request.Request:
        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": prompt}],
            "temperature": self.temperature,
        }
        return urllib.request.Request(
            self.endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            method="POST",
        )

    def _timed_out(self) -> GenerationTimeoutError:
        logger.warning("generation_timeout", extra={"provider": self.provider, "timeout_s": self.timeout_s})
        return GenerationTimeoutError()

    def _read_body(self, resp, deadline: float) -> bytes:
        chunks: List[bytes] = []
        while True:
            chunk = resp.read(READ_CHUNK_BYTES)
            if not chunk:
                break
            chunks.append(chunk)
            if self.clock() > deadline:
                raise self._timed_out()
        return b"".join(chunks)

    def _call_once(self, prompt: str, deadline: float) -> dict:
        req = self._build_request(prompt)
        with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
            return json.loads(self._read_body(resp, deadline).decode("utf-8"))

    @staticmethod
    def _http_error_reason(he: urllib.error.HTTPError) -> str:
        body = None
        try:
            body = he.read().decode("utf-8", errors="ignore")
        except (OSError, http.client.HTTPException):
            body = None
        finally:
            he.close()
        return f"HTTP {he.code} body={(body or '')[:200]}"

    def generate(self, prompt: str) -> str:
        if not (self.api_key or "").strip():
            logger.error("generation_misconfigured", extra={"provider": self.provider})
            raise UpstreamUnavailableError(f"API key missing for provider {self.provider}")

        logger.info(
            "generation_dispatch",
            extra={"provider": self.provider, "model": self.model, "prompt_chars": len(prompt)},
        )
        deadline = self.clock() + self.timeout_s
        last_err = ""
        for attempt in range(self.max_retries + 1):
            try:
                data = self._call_once(prompt, deadline)
            except urllib.error.HTTPError as he:
                # HTTPError must be checked before URLError/OSError (it is a subclass)
                last_err = self._http_error_reason(he)
                if he.code not in RETRYABLE_STATUS:
                    break
            except (OSError, http.client.HTTPException) as e:
                if _is_timeout(e):
                    raise self._timed_out() from e
                last_err = f"{type(e).__name__}: {e}"
            except ValueError as e:
                # Body was not JSON (or not UTF-8); retrying would not change the answer
                last_err = f"{type(e).__name__}: {e}"
                break
            else:
                if not isinstance(data, dict):
                    last_err = "provider response was not a JSON object"
                    break
                return _completion_text(data)

            if attempt < self.max_retries:
                delay = self.backoff_s * (2 ** attempt)
                if self.clock() + delay >= deadline:
                    last_err += " (no time left to retry)"
                    break
                logger.warning(
                    "generation_retry",
                    extra={"provider": self.provider, "attempt": attempt + 1, "delay_s": delay, "reason": last_err},
                )
                self.sleep(delay)

        logger.error("generation_unavailable", extra={"provider": self.provider, "reason": last_err})
        raise UpstreamUnavailableError(f"{self.provider}: {last_err}")


def _openai(settings: Settings) -> TextGenerator:
    return ChatCompletionsGenerator(
        provider="openai",
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        base_url=settings.OPENAI_BASE_URL,
        temperature=settings.TEMPERATURE,
        timeout_s=settings.GENERATION_TIMEOUT_S,
        max_retries=settings.GENERATION_MAX_RETRIES,
        backoff_s=settings.GENERATION_RETRY_BACKOFF_S,
    )


def _groq(settings: Settings) -> TextGenerator:
    return ChatCompletionsGenerator(
        provider="groq",
        api_key=settings.GROQ_API_KEY,
        model=settings.GROQ_MODEL,
        base_url=settings.GROQ_BASE_URL,
        temperature=settings.TEMPERATURE,
        timeout_s=settings.GENERATION_TIMEOUT_S,
        max_retries=settings.GENERATION_MAX_RETRIES,
        backoff_s=settings.GENERATION_RETRY_BACKOFF_S,
    )


PROVIDERS: Dict[str, Callable[[Settings], TextGenerator]] = {
    "openai": _openai,
    "groq": _groq,
}


def available_providers() -> List[str]:
    return sorted(PROVIDERS)


def get_generator(settings: Settings) -> TextGenerator:
    try:
        factory = PROVIDERS[settings.PROVIDER]
    except KeyError:
        raise ValueError(
            f"unknown generation provider: {settings.PROVIDER} (available: {', '.join(available_providers())})"
        ) from None
    return factory(settings)
