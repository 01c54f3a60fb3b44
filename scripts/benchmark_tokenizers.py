import argparse
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from tqdm import tqdm

from lm_rank_tokenizer import RankBPETokenizer, TokenizerClient, VocabularyLoader


def print_stat(kind: str, elapsed: float, num_tokens: int, num_bytes: int):
    print(f"{kind} {num_tokens} toks: {num_tokens / elapsed / 1e6:.3f}M toks/sec, "
          f"{num_bytes / elapsed / 1e6:.3f} MB/sec")


def benchmark_tokenizer(tokenizer: RankBPETokenizer, data: bytes) -> bool:
    """Encode and decode data once, printing throughput. Returns round-trip equality."""
    print(f"Benchmarking {tokenizer}")

    start_time = time.time()
    tokens = tokenizer.encode(data)
    print_stat("Encoded", time.time() - start_time, len(tokens), len(data))

    start_time = time.time()
    decoded = tokenizer.decode_bytes(tokens)
    print_stat("Decoded", time.time() - start_time, len(tokens), len(data))

    round_trip = decoded == data
    print(f"Round trip equality: {round_trip}")
    return round_trip


def benchmark_server(server_addr: str, vocab: str, num_threads: int, queries_per_thread: int):
    """Hammer a running service from several threads and print the request rate"""
    client = TokenizerClient(server_addr, vocab)

    text = "Hi there!"
    tokens = client.encode(text)
    print(f"Encode: {text} -> {tokens}")
    print(f"Decode: {tokens} -> {client.decode(tokens).decode('utf-8', errors='replace')}")

    def worker(thread_id: int):
        for i in range(queries_per_thread):
            client.encode(f"{text}{i}")
        return thread_id

    start_time = time.time()
    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        futures = [pool.submit(worker, t) for t in range(num_threads)]
        for future in tqdm(futures, desc="Client threads"):
            future.result()
    elapsed = time.time() - start_time

    total = num_threads * queries_per_thread
    print(f"Multi-client: {elapsed:.3f}sec total, {total / elapsed:.0f} requests/sec")


def main():
    parser = argparse.ArgumentParser(description="Benchmark rank-file tokenizers")
    parser.add_argument('--vocab', default='p50k_base', help='Vocabulary name')
    parser.add_argument('--vocab-dir', default='data/vocabs', help='Directory with .tiktoken files')
    parser.add_argument('--alphabet', default='codepoint', choices=['codepoint', 'byte'])
    parser.add_argument('--download', action='store_true', help='Download the vocabulary if missing')
    parser.add_argument('--text', default='data/data.txt', help='Text file to encode')
    parser.add_argument('--server', help='host:port of a running service to benchmark instead')
    parser.add_argument('--threads', type=int, default=8)
    parser.add_argument('--queries', type=int, default=1000)
    args = parser.parse_args()

    if args.server:
        benchmark_server(args.server, args.vocab, args.threads, args.queries)
        return

    text_path = Path(args.text)
    if not text_path.exists():
        raise FileNotFoundError(f"Data file {text_path} not found")
    data = text_path.read_bytes()

    loader = VocabularyLoader(args.vocab_dir, enable_download=args.download, alphabet=args.alphabet)
    tokenizer = loader(args.vocab)

    if not benchmark_tokenizer(tokenizer, data):
        raise SystemExit("Error: decoded text differs from the original")


if __name__ == "__main__":
    main()
