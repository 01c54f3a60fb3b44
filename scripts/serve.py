from dataclasses import fields

import uvicorn

from lm_rank_tokenizer import ServiceConfig, VocabularyLoader, VocabularyRegistry
from lm_rank_tokenizer.args_parser import ArgsParser
from lm_rank_tokenizer.server import create_app


def main():
    parser = ArgsParser(
        description="Serve rank-file tokenizers over HTTP",
        known_keys=[f.name for f in fields(ServiceConfig)],
    )
    config_path, overrides = parser.parse_config_args()
    config = ServiceConfig.from_file(config_path, overrides)

    print("=== Config ===")
    for key, value in config.to_dict().items():
        print(f"{key}: {value}")

    loader = VocabularyLoader(
        vocab_dir=config.vocab_dir,
        extension=config.vocab_extension,
        enable_download=config.enable_download,
        alphabet=config.alphabet,
        timeout=config.download_timeout,
        retries=config.download_retries,
    )
    registry = VocabularyRegistry(loader)
    app = create_app(registry, preload=config.preload)

    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
