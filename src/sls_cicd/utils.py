import copy
from typing import Any, Dict

from deepmerge import Merger

# Списки заменяются целиком: повторный запуск хука не должен
# дублировать стадии пайплайна, политики и переменные окружения
resources_merger = Merger(
    [(list, ["override"]), (dict, ["merge"]), (set, ["union"])],
    ["override"],
    ["override"],
)


def merge_resources(service: Dict[str, Any], document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Мержит документ {Resources: {...}} в service["resources"] на месте.

    Уже существующие ресурсы пользователя сохраняются. В одноимённых логических
    ресурсах словари мержатся глубоко, а списки берутся из сгенерированного документа.
    """
    return resources_merger.merge(service, {"resources": copy.deepcopy(document)})
