import tempfile
import unittest
from pathlib import Path

import pandas as pd

from ingredient_mining.experiments.base import apply_filters, create_miner, load_data, run_rule_mining
from ingredient_mining.experiments.config import (
    DataConfig, FilterConfig, MinerConfig, PatternFilterConfig, RuleMiningConfig
)
from ingredient_mining.experiments.run_rule_mining import run_experiment
from ingredient_mining.rule_mining.apriori_miner import AprioriMiner
from ingredient_mining.rule_mining.base import InsufficientDataError, Transaction
from ingredient_mining.rule_mining.mlxtend_miner import MLxtendMiner


def make_transactions(*item_lists):
    return [Transaction.from_items(i, items) for i, items in enumerate(item_lists)]


SCENARIO = make_transactions(['A', 'B'], ['A', 'B'], ['A', 'C'], ['B', 'C'])


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        cfg = MinerConfig()
        self.assertEqual(cfg.to_dict(), {
            'min_support': 0.4,
            'min_confidence': 0.6,
            'max_itemset_size': 3,
            'min_transactions': 2
        })

    def test_rule_mining_config_to_dict(self):
        cfg = RuleMiningConfig(filters=[FilterConfig('lift', 1.0)])
        self.assertEqual(cfg.to_dict()['filters'], [{'metric': 'lift', 'threshold': 1.0}])
        self.assertEqual(cfg.to_dict()['miner_type'], 'apriori')


class TestCreateMiner(unittest.TestCase):

    def test_apriori(self):
        miner = create_miner(RuleMiningConfig(miner_config=MinerConfig(min_support=0.5)), SCENARIO)
        self.assertIsInstance(miner, AprioriMiner)
        self.assertEqual(miner.min_support, 0.5)

    def test_mlxtend(self):
        miner = create_miner(RuleMiningConfig(miner_type='MLxtend'), SCENARIO)
        self.assertIsInstance(miner, MLxtendMiner)

    def test_unknown(self):
        with self.assertRaises(ValueError):
            create_miner(RuleMiningConfig(miner_type='fpgrowth'), SCENARIO)


class TestRunRuleMining(unittest.TestCase):

    def setUp(self):
        self.config = RuleMiningConfig(miner_config=MinerConfig(min_support=0.5, min_confidence=0.5))

    def test_both_modes(self):
        results, stats = run_rule_mining(SCENARIO, self.config)
        self.assertEqual(len(results['itemsets']), 4)
        self.assertEqual(len(results['rules']), 2)
        self.assertEqual(stats['itemsets']['count'], 4)
        self.assertEqual(stats['rules']['count'], 2)

    def test_itemsets_only(self):
        self.config.mode = 'itemsets'
        results, stats = run_rule_mining(SCENARIO, self.config)
        self.assertEqual(results['rules'], [])
        self.assertNotIn('rules', stats)

    def test_filters(self):
        self.config.filters = [FilterConfig('support', 0.6), FilterConfig('confidence', 0.9)]
        results, stats = run_rule_mining(SCENARIO, self.config)
        self.assertEqual([i.items for i in results['itemsets']], [('A',), ('B',)])
        self.assertEqual(results['rules'], [])
        self.assertEqual(stats['rules']['count'], 0)

    def test_itemset_filters_skip_rule_metrics(self):
        itemsets = AprioriMiner(SCENARIO, 0.5, 0.5).frequent_itemsets()
        self.assertEqual(apply_filters(itemsets, [FilterConfig('lift', 2.0)], mode='itemsets'), itemsets)

    def test_pattern_filter_applies_to_rules_only(self):
        self.config.filters = [PatternFilterConfig(antecedent_contains=['a'])]
        results, stats = run_rule_mining(SCENARIO, self.config)
        self.assertEqual([(r.antecedent, r.consequent) for r in results['rules']], [(('A',), ('B',))])
        self.assertEqual(stats['rules']['count'], 1)
        self.assertEqual(len(results['itemsets']), 4)

    def test_pattern_and_metric_filters_combine(self):
        rules = AprioriMiner(SCENARIO, 0.25, 0.5).association_rules()
        filtered = apply_filters(rules, [
            PatternFilterConfig(antecedent_excludes=['a']),
            FilterConfig('confidence', 0.6),
        ])
        self.assertEqual([(r.antecedent, r.consequent) for r in filtered], [(('B',), ('A',))])

    def test_pattern_filter_to_dict(self):
        cfg = RuleMiningConfig(filters=[PatternFilterConfig(consequent_contains=['Kuah'], match_any=True)])
        self.assertEqual(cfg.to_dict()['filters'][0]['consequent_contains'], ['Kuah'])
        self.assertTrue(cfg.to_dict()['filters'][0]['match_any'])

    def test_unknown_mode(self):
        self.config.mode = 'all'
        with self.assertRaises(ValueError):
            run_rule_mining(SCENARIO, self.config)

    def test_insufficient_history(self):
        with self.assertRaises(InsufficientDataError):
            run_rule_mining(SCENARIO[:1], self.config)


class TestLoadAndRun(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        pd.DataFrame({
            'record_id': ['r1', 'r1', 'r2', 'r2', 'r3', 'r3', 'r4', 'r4', 'r4'],
            'ingredient_id': [1, 2, 1, 2, 1, 3, 2, 3, 99],
        }).to_csv(self.root / 'history.csv', index=False)
        pd.DataFrame({
            'id': [1, 2, 3],
            'name': ['Daging Sapi', 'Tepung Tapioka', 'Bawang Putih'],
        }).to_csv(self.root / 'ingredients.csv', index=False)
        self.data_config = DataConfig(
            history_path=str(self.root / 'history.csv'),
            ingredients_path=str(self.root / 'ingredients.csv')
        )

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_data_resolves_ids(self):
        transactions = load_data(self.data_config)
        self.assertEqual(len(transactions), 4)
        self.assertEqual(transactions[3].items, frozenset({'Tepung Tapioka', 'Bawang Putih'}))

    def test_load_data_with_names(self):
        pd.DataFrame({'record_id': [1, 1, 2], 'ingredient': ['salt', 'beef', 'salt']}).to_csv(
            self.root / 'named.csv', index=False)
        transactions = load_data(DataConfig(history_path=str(self.root / 'named.csv'), item_col='ingredient'))
        self.assertEqual(transactions[0].items, frozenset({'salt', 'beef'}))

    def test_run_experiment_writes_outputs(self):
        config = RuleMiningConfig(miner_config=MinerConfig(min_support=0.5, min_confidence=0.5))
        out_dir = self.root / 'out'
        summary = run_experiment(self.data_config, config, output_dir=str(out_dir))
        self.assertEqual(summary['num_transactions'], 4)
        self.assertEqual(summary['num_rules'], 2)
        self.assertEqual(len(list(out_dir.glob('*.xlsx'))), 1)
        self.assertEqual(len(list(out_dir.glob('*.txt'))), 1)

    def test_run_experiment_with_too_little_history(self):
        pd.DataFrame({'record_id': ['r1'], 'ingredient_id': [1]}).to_csv(self.root / 'short.csv', index=False)
        data_config = DataConfig(
            history_path=str(self.root / 'short.csv'),
            ingredients_path=str(self.root / 'ingredients.csv')
        )
        out_dir = self.root / 'out'
        self.assertIsNone(run_experiment(data_config, output_dir=str(out_dir)))
        self.assertFalse(out_dir.exists())


if __name__ == '__main__':
    unittest.main()
