import logging
import sys
import traceback

import config
from knowledge.loader import load_knowledge_store
from rag.pipeline import KnowledgePipeline


def print_header(entry_count: int):
    print("\n" + "=" * 60)
    print("🌾 KRISHI KNOWLEDGE — Reference Search")
    print(f"{entry_count} reference entries loaded.")
    print("Type your question (English, हिंदी, मराठी).")
    print("Type 'exit' or 'quit' to stop.")
    print("=" * 60 + "\n")


def print_result(result: dict):
    print(f"\n🗣️  LANGUAGE: {result.get('language')}")

    print("\n📚 REFERENCES:")
    references = result.get("references", [])
    if not references:
        print("  None")
        if result.get("message"):
            print(f"  ({result['message']})")
    else:
        for i, ref in enumerate(references, start=1):
            print(f"  {i}. {ref['title']} [{ref['id']}] score={ref['score']:.4f}")
            print(f"     {ref['source']} · updated {ref['updated']}")

    print("\n🧾 CONTEXT:")
    print(result.get("context_text", ""))

    print("\n" + "-" * 60 + "\n")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = load_knowledge_store(argv[0] if argv else None)
    pipeline = KnowledgePipeline(store)
    print_header(len(store))

    while True:
        try:
            query = input("👨‍🌾 Ask: ").strip()

            if not query:
                print("⚠️  Empty question. Try again.\n")
                continue

            if query.lower() in {"exit", "quit"}:
                print("\n👋 Exiting. Goodbye.")
                break

            print_result(pipeline.run(question=query))

        except (KeyboardInterrupt, EOFError):
            print("\n\n👋 Interrupted. Exiting cleanly.")
            break

        except Exception as e:
            print("\n❌ SYSTEM ERROR")
            print(str(e))
            print("\nTraceback (for debugging):")
            traceback.print_exc()
            print("\nSystem recovered. You can continue asking questions.\n")


if __name__ == "__main__":
    main()
