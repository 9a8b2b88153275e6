# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/plan.py

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PlanFile:
    """A file written on the node before any instruction runs."""
    path: str
    content: str                  # base64 encoded

    @classmethod
    def from_text(cls, path: str, text: str) -> "PlanFile":
        return cls(path=path, content=base64.b64encode(text.encode()).decode())

    def decoded(self) -> str:
        return base64.b64decode(self.content).decode()


@dataclass(frozen=True)
class OneTimeInstruction:
    name: str
    command: str
    args: List[str] = field(default_factory=list)
    env: List[str] = field(default_factory=list)
    image: Optional[str] = None


@dataclass
class NodePlan:
    """
    Instruction document delivered to one node. Instructions run in order,
    once, after every file has been written.
    """
    instructions: List[OneTimeInstruction] = field(default_factory=list)
    files: List[PlanFile] = field(default_factory=list)

    def add_files(self, files: List[PlanFile]) -> None:
        for f in files:
            if f not in self.files:
                self.files.append(f)

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"instructions": []}
        for ins in self.instructions:
            item: Dict[str, Any] = {"name": ins.name, "command": ins.command, "args": list(ins.args)}
            if ins.env:
                item["env"] = list(ins.env)
            if ins.image:
                item["image"] = ins.image
            doc["instructions"].append(item)
        if self.files:
            doc["files"] = [{"path": f.path, "content": f.content} for f in self.files]
        return doc
