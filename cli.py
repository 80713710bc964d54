import asyncio
import logging
from pathlib import Path

from assistant import build_assistant
from config import config
from errors import RoutineAssistantError
from utils import clean_markdown, render_suggestions_html, render_transcript_html

HELP = """Commands:
  /categories            list catalogue categories
  /browse <category>     show products in a category
  /search <text>         search names, brands and descriptions
  /details <id>          show a product's full description
  /select <id>           select or deselect a product
  /remove <id>           remove a product from the selection
  /selected              show selected products
  /clear                 clear all selections
  /routine               generate a routine from the selection
  /restart               clear the conversation
  /export <file.html>    write the transcript as HTML
  exit                   quit
Anything else is sent to the assistant."""


def _confirm(prompt: str) -> bool:
    return input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")


def format_details(product) -> str:
    lines = [f"[{product.id}] {product.name}"]
    if product.brand:
        lines.append(f"Brand: {product.brand}")
    if product.category:
        lines.append(f"Category: {product.category}")
    lines.append(product.description or "No description available.")
    return "\n".join(lines)


def _print_products(products):
    if not products:
        print("No products found.\n")
        return
    for p in products:
        print(f"  [{p.id}] {p.name} ({p.brand}) - {p.category}")
    print()


async def run():
    assistant = build_assistant()
    for notice in await assistant.startup():
        print(f"! {notice}")
    last_suggestions = []

    print("💬 Product Routine Assistant (type /help for commands, 'exit' to quit)\n")
    for msg in assistant.transcript():
        print(f"{msg.role.value.capitalize()}: {clean_markdown(msg.content)}\n")

    while True:
        user_input = (await asyncio.to_thread(input, "You: ")).strip()
        if not user_input:
            continue
        if user_input.lower() == "exit":
            break

        command, _, arg = user_input.partition(" ")
        arg = arg.strip()
        try:
            if command == "/help":
                print(HELP + "\n")
            elif command == "/categories":
                print("\n".join(f"  {c}" for c in assistant.categories()) + "\n")
            elif command == "/browse":
                _print_products(assistant.browse(category=arg))
            elif command == "/search":
                _print_products(assistant.browse(query=arg))
            elif command == "/details":
                print(format_details(assistant.product_details(arg)) + "\n")
            elif command == "/select":
                state = "selected" if assistant.toggle_product(arg) else "deselected"
                print(f"{arg} {state}.\n")
            elif command == "/remove":
                print(f"{arg} removed.\n" if assistant.remove_product(arg) else f"{arg} was not selected.\n")
            elif command == "/selected":
                selected = assistant.selected_products()
                if not selected:
                    print("No products selected\n")
                for s in selected:
                    print(f"  [{s.id}] {s.name}")
            elif command == "/clear":
                if _confirm("Clear all selected products?"):
                    assistant.clear_selections()
            elif command == "/restart":
                if _confirm("Restart chat? This will clear the conversation history."):
                    assistant.restart_chat()
                    last_suggestions = []
                    print("Chat restarted. Ask me about products or routines…\n")
            elif command == "/export":
                target = Path(arg or "transcript.html")
                target.write_text(
                    render_transcript_html(assistant.transcript()) + render_suggestions_html(last_suggestions),
                    encoding="utf-8",
                )
                print(f"Transcript written to {target}\n")
            elif command == "/routine":
                print("Generating routine…")
                result = await assistant.generate_routine()
                print(f"Assistant: {clean_markdown(result.message)}\n")
                last_suggestions = result.suggestions
                if result.suggestions:
                    print("Recommended products for missing steps:")
                    for s in result.suggestions:
                        print(f"  - {s.product.name} ({s.product.brand}) - {s.product.description}")
                    print()
            else:
                result = await assistant.chat(user_input)
                print(f"Assistant: {clean_markdown(result.message)}\n")
        except (RoutineAssistantError, ValueError, OSError) as e:
            print(f"Error: {e}\n")


def main():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    config.validate()
    asyncio.run(run())


if __name__ == "__main__":
    main()
