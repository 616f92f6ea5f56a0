"""
entitygen - Test Configuration and Fixtures
"""
import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest


CLIENT_SRC = "src/main/webapp"

NAVBAR_VUE = """<template>
  <b-navbar>
    <b-nav-item-dropdown id="entity-menu">
      <!-- jhipster-needle-add-entity-to-menu - JHipster will add entities to the menu here -->
    </b-nav-item-dropdown>
  </b-navbar>
</template>
"""

ROUTER_TS = """import { Authority } from '@/shared/security/authority';
/* tslint:disable */
// prettier-ignore
const Entities = () => import('@/entities/entities.vue');

// jhipster-needle-add-entity-to-router-import - JHipster will import entities to the router here

export default {
  path: '/',
  component: Entities,
  children: [
    // jhipster-needle-add-entity-to-router - JHipster will add entities to the router here
  ],
};
"""

MAIN_TS = """import Vue from 'vue';
// jhipster-needle-add-entity-service-to-main-import - JHipster will import entities services here

new Vue({
  provide: {
    // jhipster-needle-add-entity-service-to-main - JHipster will import entities services here
  },
});
"""


@pytest.fixture
def vue_project(tmp_path: Path) -> Path:
    """Project directory holding the three Vue client files with their needles"""
    files = {
        f"{CLIENT_SRC}/app/core/jhi-navbar/jhi-navbar.vue": NAVBAR_VUE,
        f"{CLIENT_SRC}/app/router/entities.ts": ROUTER_TS,
        f"{CLIENT_SRC}/app/main.ts": MAIN_TS,
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def write_model(tmp_path: Path) -> Callable[..., str]:
    """Write a JSON model document and return its path"""
    def _write(document: Dict[str, Any], name: str = "model.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def project_config(tmp_path: Path) -> Callable[..., Path]:
    """Write a .yo-rc.json project record"""
    def _write(**values: Any) -> Path:
        record = {"baseName": "store", "applicationType": "monolith", **values}
        path = tmp_path / ".yo-rc.json"
        path.write_text(json.dumps({"generator-jhipster": record}), encoding="utf-8")
        return path
    return _write

