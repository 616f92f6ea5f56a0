"""
Vue client needles

Builds the insertions that register a generated entity in the Vue client:
navbar menu, router imports, router routes and the service registry in main.ts.
"""

import re
from dataclasses import dataclass
from typing import Optional

from entitygen.needles.matcher import Needle
from entitygen.needles.mutator import FileMutator, MutationRequest, MutationResult
from entitygen.utils import lower_first, start_case


@dataclass
class NeedleInsertion:
    """A request plus the warning shown when it cannot be applied"""
    request: MutationRequest
    error_message: str


def route_exists(text: str, entity_file_name: str) -> bool:
    """True when a route for /<entity_file_name> is already declared"""
    pattern = r"path:\s*(['\"`])/" + re.escape(entity_file_name) + r"\1"
    return re.search(pattern, text) is not None


class VueClientNeedles:
    """Needle insertions for the Vue client"""

    def __init__(self, client_main_src_dir: str = "src/main/webapp", mutator: Optional[FileMutator] = None):
        self.client_main_src_dir = client_main_src_dir.rstrip("/")
        self.mutator = mutator or FileMutator()

    @property
    def navbar_path(self) -> str:
        return f"{self.client_main_src_dir}/app/core/jhi-navbar/jhi-navbar.vue"

    @property
    def router_path(self) -> str:
        return f"{self.client_main_src_dir}/app/router/entities.ts"

    @property
    def main_path(self) -> str:
        return f"{self.client_main_src_dir}/app/main.ts"

    # ==================== Builders ====================

    def build_menu_entry(self, router_name: str, enable_translation: bool,
                         entity_translation_key_menu: str) -> NeedleInsertion:
        menu_i18n_title = (
            f" v-text=\"$t('global.menu.entities.{entity_translation_key_menu}')\""
            if enable_translation else ""
        )
        payload = "\n".join([
            f'<b-dropdown-item to="/{router_name}">',
            '    <font-awesome-icon icon="asterisk" />',
            f"    <span{menu_i18n_title}>{start_case(router_name)}</span>",
            "</b-dropdown-item>",
        ])
        return NeedleInsertion(
            request=MutationRequest(
                target_path=self.navbar_path,
                needle=Needle.ENTITY_TO_MENU,
                payload=payload,
                duplicate_check=f'<b-dropdown-item to="/{router_name}">',
            ),
            error_message=f"Reference to {router_name} not added to menu.",
        )

    def build_router_import(self, entity_name: str, file_name: str, folder_name: str,
                            read_only: bool) -> NeedleInsertion:
        lines = [
            "// prettier-ignore",
            f"const {entity_name} = () => import('@/entities/{folder_name}/{file_name}.vue');",
        ]
        if not read_only:
            lines += [
                "// prettier-ignore",
                f"const {entity_name}Update = () => import('@/entities/{folder_name}/{file_name}-update.vue');",
            ]
        lines += [
            "// prettier-ignore",
            f"const {entity_name}Details = () => import('@/entities/{folder_name}/{file_name}-details.vue');",
        ]
        return NeedleInsertion(
            request=MutationRequest(
                target_path=self.router_path,
                needle=Needle.ENTITY_TO_ROUTER_IMPORT,
                payload="\n".join(lines),
                duplicate_check=f"const {entity_name} = () => import(",
            ),
            error_message=f"Reference to entity {entity_name} not added to router entities import.",
        )

    def build_router_entry(self, entity_name: str, entity_file_name: str,
                           read_only: bool) -> Optional[NeedleInsertion]:
        """Route records for an entity, None when its routes are already registered"""
        router_file = self.mutator.resolve_path(self.router_path)
        if router_file.is_file() and route_exists(router_file.read_text(encoding="utf-8"), entity_file_name):
            return None

        routes = [(f"/{entity_file_name}", entity_name, entity_name)]
        if not read_only:
            routes += [
                (f"/{entity_file_name}/new", f"{entity_name}Create", f"{entity_name}Update"),
                (f"/{entity_file_name}/:{entity_file_name}Id/edit", f"{entity_name}Edit", f"{entity_name}Update"),
            ]
        routes.append(
            (f"/{entity_file_name}/:{entity_file_name}Id/view", f"{entity_name}View", f"{entity_name}Details")
        )

        lines = []
        for path, name, component in routes:
            lines += [
                "{",
                f"  path: '{path}',",
                f"  name: '{name}',",
                f"  component: {component},",
                "  meta: { authorities: [Authority.USER] }",
                "},",
            ]
        return NeedleInsertion(
            request=MutationRequest(
                target_path=self.router_path,
                needle=Needle.ENTITY_TO_ROUTER,
                payload="\n".join(lines),
            ),
            error_message=f"Reference to entity {entity_name} not added to router entities.",
        )

    def build_service_import(self, entity_class: str, entity_file_name: str,
                             entity_folder_name: str) -> NeedleInsertion:
        statement = (
            f"import {entity_class}Service from "
            f"'@/entities/{entity_folder_name}/{entity_file_name}.service';"
        )
        return NeedleInsertion(
            request=MutationRequest(
                target_path=self.main_path,
                needle=Needle.ENTITY_SERVICE_TO_MAIN_IMPORT,
                payload=statement,
                duplicate_check=statement,
            ),
            error_message=f"Reference to entity {entity_class} not added to import in main.",
        )

    def build_service_registration(self, entity_class: str) -> NeedleInsertion:
        key = f"{lower_first(entity_class)}Service"
        return NeedleInsertion(
            request=MutationRequest(
                target_path=self.main_path,
                needle=Needle.ENTITY_SERVICE_TO_MAIN,
                payload=f"{key}: () => new {entity_class}Service(),",
                duplicate_check=re.compile(r"(?<![\w$])" + re.escape(key) + r"\s*:"),
            ),
            error_message=f"Reference to entity {entity_class} not added to service in main.",
        )

    # ==================== Build + apply ====================

    def _apply(self, insertion: NeedleInsertion) -> MutationResult:
        return self.mutator.apply(insertion.request, insertion.error_message)

    def add_entity_to_menu(self, router_name: str, enable_translation: bool,
                           entity_translation_key_menu: str) -> MutationResult:
        return self._apply(self.build_menu_entry(router_name, enable_translation, entity_translation_key_menu))

    def add_entity_to_router_import(self, entity_name: str, file_name: str, folder_name: str,
                                    read_only: bool) -> MutationResult:
        return self._apply(self.build_router_import(entity_name, file_name, folder_name, read_only))

    def add_entity_to_router(self, entity_name: str, entity_file_name: str,
                             read_only: bool) -> Optional[MutationResult]:
        insertion = self.build_router_entry(entity_name, entity_file_name, read_only)
        if insertion is None:
            return None
        return self._apply(insertion)

    def add_entity_service_to_main_import(self, entity_class: str, entity_file_name: str,
                                          entity_folder_name: str) -> MutationResult:
        return self._apply(self.build_service_import(entity_class, entity_file_name, entity_folder_name))

    def add_entity_service_to_main(self, entity_class: str) -> MutationResult:
        return self._apply(self.build_service_registration(entity_class))
