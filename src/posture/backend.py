from typing import Any

from .config import PostureConfig

GBNF_SCHEMA = r"""
root ::= "{" ws "\"postureAnalysis\"" ws ":" ws string ws "," ws "\"stretchRecommendations\"" ws ":" ws string ws "}"
string ::= "\"" (char)* "\""
char ::= [^"\\] | escape
escape ::= "\\" (["\\/bfnrt] | "u" hex hex hex hex)
hex ::= [0-9a-fA-F]
ws ::= ([ \t\n\r])*
""".strip()


class LlavaBackend:
    """llama.cpp chat completion with a CLIP projector for image input."""

    def __init__(self, config: PostureConfig):
        from llama_cpp import Llama, LlamaGrammar
        from llama_cpp.llama_chat_format import Llava15ChatHandler

        chat_handler = Llava15ChatHandler(
            clip_model_path=config.clip_model_path,
            verbose=config.verbose,
        )
        self._llm = Llama(
            model_path=config.model_path,
            chat_handler=chat_handler,
            n_threads=config.n_threads,
            n_ctx=config.n_ctx,
            n_batch=config.n_batch,
            verbose=config.verbose,
        )
        self._grammar = LlamaGrammar.from_string(GBNF_SCHEMA)
        self._config = config

    def complete(self, messages: list[dict[str, Any]], max_tokens: int) -> str:
        response: dict[str, Any] = self._llm.create_chat_completion(
            messages=messages,
            temperature=self._config.temperature,
            top_p=self._config.top_p,
            max_tokens=max_tokens,
            grammar=self._grammar,
        )
        return response["choices"][0]["message"]["content"]
