"""Sequential content transform pipeline."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from rulecast.models import BuiltinTransform, CustomTransform, SyncContext, Transform
from rulecast.transforms.builtin import ContextHook, make_builtin, parse_builtin_hook
from rulecast.utils import call_maybe_async


class TransformPipeline:
    """Run rule hooks, then global after-transforms, one stage at a time."""

    def __init__(
        self,
        after: Sequence[Transform] = (),
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.environ = environ
        self._after = [self._resolve(transform) for transform in after]

    @property
    def has_global_transforms(self) -> bool:
        return bool(self._after)

    async def run(self, context: SyncContext) -> str:
        for name in context.rule.hooks:
            hook = parse_builtin_hook(name)
            if hook is None:
                continue
            await self._apply(make_builtin(hook, environ=self.environ), context)
        for func in self._after:
            await self._apply(func, context)
        return context.content

    @staticmethod
    async def _apply(func: ContextHook, context: SyncContext) -> None:
        result = await call_maybe_async(func, context)
        if isinstance(result, str):
            context.content = result

    def _resolve(self, transform: Transform) -> ContextHook:
        if isinstance(transform, BuiltinTransform):
            return make_builtin(transform.hook, transform.options, self.environ)
        if isinstance(transform, CustomTransform):
            return transform.func
        raise TypeError(f"Unsupported transform: {transform!r}")
