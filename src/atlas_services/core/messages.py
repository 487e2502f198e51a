# src/atlas_services/core/messages.py
"""
Acúmulo de errors e warnings de domínio de uma invocação.

Mensagens de domínio não são exceções: são coletadas em um `MessageLog`
e só interrompem a execução conforme a política do log:

    - break_on_add    → marca o log como "quebrado" (encerra o loop de steps)
    - raise_on_add    → levanta `RaisedMessageError` imediatamente
    - rollback_on_add → sinaliza rollback ao escopo transacional corrente

Opções por chamada (`break_`, `rollback`) têm precedência sobre a política.

Invariantes:
    - A flag de break é monotônica: uma vez marcada, permanece marcada
    - Mensagens de uma mesma chave preservam a ordem de inserção
    - `copy_from` reaplica `add`: a política do destino governa
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from atlas_services.core.exceptions import RaisedMessageError, ServiceError

BASE_KEY = "base"


@dataclass(frozen=True)
class Message:
    """Uma entrada de error/warning com as flags já resolvidas."""

    key: str
    text: str
    break_: Optional[bool] = None
    rollback: Optional[bool] = None

    def __str__(self) -> str:
        return self.text


def _valid_text(text: Any) -> bool:
    return isinstance(text, str) and bool(text.strip())


class MessageLog:
    def __init__(
        self,
        *,
        break_on_add: bool = False,
        raise_on_add: bool = False,
        rollback_on_add: bool = False,
        on_rollback: Optional[Callable[[], None]] = None,
    ):
        self.break_on_add = break_on_add
        self.raise_on_add = raise_on_add
        self.rollback_on_add = rollback_on_add
        self.on_rollback = on_rollback

        self._break = False
        self._messages: Dict[str, List[Message]] = {}

    # -----------------------------
    # Escrita
    # -----------------------------
    def add(
        self,
        key: str,
        texts: Any,
        *,
        break_: Optional[bool] = None,
        rollback: Optional[bool] = None,
        last: bool = True,
    ) -> None:
        if texts is None:
            raise ServiceError("Message must be a non-empty string", details={"key": key})

        batch = list(texts) if isinstance(texts, (list, tuple)) else [texts]
        if not batch:
            raise ServiceError("Message must be a non-empty string", details={"key": key})

        message: Optional[Message] = None
        for item in batch:
            text = item.text if isinstance(item, Message) else item
            if not _valid_text(text):
                raise ServiceError(
                    "Message must be a non-empty string",
                    details={"key": key, "received": repr(text)},
                )

            own_break = item.break_ if isinstance(item, Message) else None
            own_rollback = item.rollback if isinstance(item, Message) else None
            message = Message(
                key=key,
                text=text,
                break_=self._resolve(break_, own_break, self.break_on_add),
                rollback=self._resolve(rollback, own_rollback, self.rollback_on_add),
            )
            self._messages.setdefault(key, []).append(message)

        if self.raise_on_add:
            raise RaisedMessageError(
                f"{str(message.key).capitalize()} {message.text}",
                details={"key": message.key, "text": message.text},
                key=message.key,
                text=message.text,
            )

        if message.break_:
            self._break = True

        if message.rollback and last and self.on_rollback is not None:
            self.on_rollback()

    def copy_from(
        self,
        source: Any,
        *,
        break_: Optional[bool] = None,
        rollback: Optional[bool] = None,
    ) -> None:
        """
        Importa mensagens de outra fonte reaplicando `add` neste log.

        Fontes aceitas:
            - outro MessageLog
            - um serviço (objeto com atributo `errors` do tipo MessageLog)
            - pydantic.ValidationError (chave = `loc` pontuado)
            - mapping chave → texto(s)
            - iterável de pares (chave, texto)
        """
        pairs = _flatten(source)
        last_index = len(pairs) - 1

        for index, (key, text) in enumerate(pairs):
            self.add(key, text, break_=break_, rollback=rollback, last=index == last_index)

    # -----------------------------
    # Leitura
    # -----------------------------
    @property
    def is_broken(self) -> bool:
        return self._break

    def count(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def keys(self) -> List[str]:
        return list(self._messages)

    def items(self) -> List[Tuple[str, List[Message]]]:
        return [(key, list(messages)) for key, messages in self._messages.items()]

    def __getitem__(self, key: str) -> List[Message]:
        return list(self._messages.get(key, []))

    def __contains__(self, key: object) -> bool:
        return key in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)

    def to_dict(self) -> Dict[str, List[str]]:
        return {key: [m.text for m in messages] for key, messages in self._messages.items()}

    def __repr__(self) -> str:
        return f"MessageLog({self.to_dict()!r})"

    @staticmethod
    def _resolve(explicit: Optional[bool], own: Optional[bool], policy: bool) -> bool:
        if explicit is not None:
            return explicit
        if own is not None:
            return own
        return policy


def _flatten(source: Any) -> List[Tuple[str, str]]:
    if isinstance(source, MessageLog):
        return [(m.key, m.text) for _, messages in source.items() for m in messages]

    errors = getattr(source, "errors", None)
    if isinstance(errors, MessageLog):
        return _flatten(errors)

    if isinstance(source, ValidationError):
        return [
            (".".join(str(part) for part in error["loc"]) or BASE_KEY, error["msg"])
            for error in source.errors()
        ]

    if isinstance(source, Mapping):
        return [(key, text) for key, texts in source.items() for text in _as_texts(texts)]

    if isinstance(source, Iterable) and not isinstance(source, (str, bytes)):
        pairs: List[Tuple[str, str]] = []
        for entry in source:
            key, texts = entry
            pairs.extend((key, text) for text in _as_texts(texts))
        return pairs

    raise ServiceError(
        f"Don't know how to import messages from {type(source).__name__}",
        details={"source": type(source).__name__},
    )


def _as_texts(texts: Any) -> List[Any]:
    if isinstance(texts, (list, tuple)):
        return [t.text if isinstance(t, Message) else t for t in texts]
    return [texts.text if isinstance(texts, Message) else texts]
