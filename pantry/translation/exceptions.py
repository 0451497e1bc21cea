class TranslationFailed(Exception):
    """Le traducteur n'a pas rendu de texte exploitable (réseau, quota, réponse vide...)."""


class EntityNotFound(Exception):
    def __init__(self, entity_type: str, entity_id: int):
        super().__init__(f"{entity_type} #{entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id
