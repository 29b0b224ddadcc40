CARD_INFO = {
    "type": "verb",
    "examples": "밥을 먹어요. - I eat rice.",
    "relatedWordsRules": "먹이다 (to feed)",
    "conjugations": "먹었어요 / 먹어요 / 먹을 거예요",
    "irregularRules": "Regular verb",
    "additionalRules": "Honorific form is 드시다",
    "phonetics": "meok-da",
}

SENTENCE = {
    "korean": "학교에서 밥을 빨리 먹어요.",
    "english": "I eat quickly at school.",
    "grammarNotes": "-에서 marks the location of an action.",
}
