"""
HTTP service that shares loaded vocabularies between processes.

  POST /encode/<vocab>   body: raw text bytes
                         response: ids as uint32 little-endian
  POST /decode/<vocab>   body: ids as uint32 little-endian
                         response: raw text bytes
  GET  /vocabularies     names of the vocabularies loaded so far

Any tokenizer or I/O failure is answered with 400 and a plain-text reason.
Vocabulary loads and encode/decode run in the worker thread pool.
"""
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from .errors import TokenizerError
from .registry import VocabularyRegistry
from .wire import pack_ids, unpack_ids

RAW_MEDIA_TYPE = "application/octet-stream"


def _encode(registry: VocabularyRegistry, vocab_name: str, body: bytes) -> bytes:
    vocab = registry.get_or_load(vocab_name)
    return pack_ids(vocab.encode(body))


def _decode(registry: VocabularyRegistry, vocab_name: str, body: bytes) -> bytes:
    tokens = unpack_ids(body)
    vocab = registry.get_or_load(vocab_name)
    return vocab.decode_bytes(tokens)


class BodyReadError(TokenizerError):
    pass


async def _read_body(request: Request) -> bytes:
    try:
        return await request.body()
    except ClientDisconnect:
        raise BodyReadError("body read failed")


def create_app(registry: VocabularyRegistry, preload: Iterable[str] = ()) -> FastAPI:
    """Build the service around an explicitly constructed registry"""
    preload = list(preload)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if preload:
            await run_in_threadpool(registry.preload, preload)
        yield

    app = FastAPI(title="Rank Tokenizer Server", lifespan=lifespan)
    app.state.registry = registry

    @app.exception_handler(TokenizerError)
    async def tokenizer_error_handler(request: Request, exc: TokenizerError):
        return PlainTextResponse(str(exc), status_code=400)

    @app.exception_handler(OSError)
    async def io_error_handler(request: Request, exc: OSError):
        return PlainTextResponse(f"vocabulary load failed: {exc}", status_code=400)

    @app.post("/encode/{vocab_name}")
    async def encode(vocab_name: str, request: Request):
        body = await _read_body(request)
        packed = await run_in_threadpool(_encode, registry, vocab_name, body)
        return Response(content=packed, media_type=RAW_MEDIA_TYPE)

    @app.post("/decode/{vocab_name}")
    async def decode(vocab_name: str, request: Request):
        body = await _read_body(request)
        text = await run_in_threadpool(_decode, registry, vocab_name, body)
        return Response(content=text, media_type=RAW_MEDIA_TYPE)

    @app.get("/vocabularies")
    def vocabularies():
        return {"loaded": registry.loaded()}

    return app
