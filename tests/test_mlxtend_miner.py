import unittest

import pytest

from ingredient_mining.rule_mining.apriori_miner import AprioriMiner
from ingredient_mining.rule_mining.base import InsufficientDataError, Transaction
from ingredient_mining.rule_mining.mlxtend_miner import MLxtendMiner


HISTORY = [
    ['beef', 'noodles', 'garlic', 'shallot'],
    ['beef', 'noodles', 'garlic'],
    ['beef', 'garlic', 'tapioca'],
    ['chicken', 'noodles', 'shallot'],
    ['beef', 'noodles', 'shallot', 'garlic'],
    ['chicken', 'garlic'],
    ['beef', 'tapioca'],
    ['beef', 'noodles', 'garlic', 'tapioca'],
]


class TestMLxtendMiner(unittest.TestCase):

    def setUp(self):
        self.transactions = [Transaction.from_items(i, items) for i, items in enumerate(HISTORY)]

    def _pair(self, **kwargs):
        return (AprioriMiner(self.transactions, **kwargs), MLxtendMiner(self.transactions, **kwargs))

    def test_same_itemsets_as_apriori(self):
        ours, theirs = self._pair(min_support=0.25, min_confidence=0.65)
        expected = {i.items: (i.support, i.count) for i in ours.frequent_itemsets()}
        actual = {i.items: (i.support, i.count) for i in theirs.frequent_itemsets()}
        self.assertEqual(set(expected), set(actual))
        for items, (support, count) in expected.items():
            self.assertEqual(actual[items][0], pytest.approx(support))
            self.assertEqual(actual[items][1], count)

    def test_same_rules_as_apriori(self):
        ours, theirs = self._pair(min_support=0.25, min_confidence=0.65)
        expected = {(r.antecedent, r.consequent): r for r in ours.association_rules()}
        actual = {(r.antecedent, r.consequent): r for r in theirs.association_rules()}
        self.assertEqual(set(expected), set(actual))
        for key, rule in expected.items():
            self.assertEqual(actual[key].confidence, pytest.approx(rule.confidence))
            self.assertEqual(actual[key].lift, pytest.approx(rule.lift))
            self.assertEqual(actual[key].support, pytest.approx(rule.support))

    def test_respects_itemset_cap(self):
        _, theirs = self._pair(min_support=0.1, min_confidence=0.1, max_itemset_size=2)
        self.assertTrue(all(len(i.items) <= 2 for i in theirs.frequent_itemsets()))

    def test_sort_orders(self):
        _, theirs = self._pair(min_support=0.25, min_confidence=0.5)
        supports = [i.support for i in theirs.frequent_itemsets()]
        confidences = [r.confidence for r in theirs.association_rules()]
        self.assertEqual(supports, sorted(supports, reverse=True))
        self.assertEqual(confidences, sorted(confidences, reverse=True))

    def test_no_frequent_itemsets(self):
        _, theirs = self._pair(min_support=0.99, min_confidence=0.5)
        self.assertEqual(theirs.frequent_itemsets(), [])
        self.assertEqual(theirs.association_rules(), [])

    def test_insufficient_data(self):
        miner = MLxtendMiner(self.transactions[:1])
        with self.assertRaises(InsufficientDataError):
            miner.frequent_itemsets()

    def test_stats_name_backend(self):
        _, theirs = self._pair(min_support=0.25, min_confidence=0.65)
        _, stats = theirs.mine_rules()
        self.assertEqual(stats['algorithm'], 'MLxtend_apriori')


if __name__ == '__main__':
    unittest.main()
