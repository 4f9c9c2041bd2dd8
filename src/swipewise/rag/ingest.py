from pathlib import Path

from swipewise.config import settings
from swipewise.rag.retriever import ExemplarIndex, OpenAIEmbedder


def main(output: str | None = None) -> None:
    if not settings.openai_api_key:
        print("OPENAI_API_KEY is required to embed category exemplars")
        return

    target = Path(output or settings.exemplar_index_file)
    embedder = OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.openai_embedding_model,
    )
    index = ExemplarIndex.build(embedder)
    index.save(target)

    print(f"Embedded {len(index)} exemplar(s) into {target}")


if __name__ == "__main__":
    main()
