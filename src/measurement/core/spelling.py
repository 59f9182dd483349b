import string
import typing


class SpellChecker:
    """Suggest known catalog words that are close to a misspelled one.

    Candidates are the known words within one or two single-character edits
    (deletion, transposition, replacement, or insertion) of the query, in the
    manner of https://norvig.com/spell-correct.html. Matching ignores case.
    """

    def __init__(self, *words: str) -> None:
        self.words = {word.lower(): word for word in words if word}
        self.letters = string.ascii_lowercase

    def suggest(self, name: str, limit: int=5) -> typing.List[str]:
        """Known words close to `name`, alphabetically, at most `limit`."""
        word = name.lower()
        if word in self.words:
            return [self.words[word]]
        edits = self.edits(word)
        found = self.known(edits)
        if not found:
            found = self.known(e2 for e1 in edits for e2 in self.edits(e1))
        return sorted(found)[:limit]

    def known(self, words: typing.Iterable[str]) -> typing.Set[str]:
        """The original spelling of each member of `words` that is known."""
        return {self.words[word] for word in words if word in self.words}

    def edits(self, word: str) -> typing.Set[str]:
        """All strings that are one edit away from `word`."""
        splits = [(word[:i], word[i:]) for i in range(len(word) + 1)]
        deletes = [left + right[1:] for left, right in splits if right]
        transposes = [
            left + right[1] + right[0] + right[2:]
            for left, right in splits if len(right) > 1
        ]
        replaces = [
            left + c + right[1:]
            for left, right in splits if right for c in self.letters
        ]
        inserts = [left + c + right for left, right in splits for c in self.letters]
        return set(deletes + transposes + replaces + inserts)
