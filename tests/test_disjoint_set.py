import random
import unittest

from labyrinth.maze import DisjointSet


class DisjointSetTests(unittest.TestCase):
    def test_new_set_has_singletons(self) -> None:
        disjoint_set = DisjointSet(5)
        self.assertEqual(disjoint_set.count, 5)
        self.assertEqual([disjoint_set.find(i) for i in range(5)], [0, 1, 2, 3, 4])

    def test_union_reports_whether_sets_were_merged(self) -> None:
        disjoint_set = DisjointSet(4)
        self.assertTrue(disjoint_set.union(0, 1))
        self.assertTrue(disjoint_set.union(2, 3))
        self.assertFalse(disjoint_set.union(1, 0))
        self.assertTrue(disjoint_set.union(1, 3))
        self.assertFalse(disjoint_set.union(0, 2))
        self.assertEqual(disjoint_set.count, 1)
        self.assertEqual(len(disjoint_set), 1)

    def test_rejected_union_leaves_forest_unchanged(self) -> None:
        disjoint_set = DisjointSet(6)
        for i, j in ((0, 1), (1, 2), (3, 4)):
            disjoint_set.union(i, j)
        # Compress first so the rejected union's own finds change nothing.
        for i in range(6):
            disjoint_set.find(i)
        parents = list(disjoint_set._parent)
        ranks = list(disjoint_set._rank)
        self.assertFalse(disjoint_set.union(2, 0))
        self.assertEqual(disjoint_set._parent, parents)
        self.assertEqual(disjoint_set._rank, ranks)
        self.assertEqual(disjoint_set.count, 3)

    def test_equal_ranks_attach_second_root_under_first(self) -> None:
        disjoint_set = DisjointSet(2)
        disjoint_set.union(0, 1)
        self.assertEqual(disjoint_set.find(1), 0)
        self.assertEqual(disjoint_set.rank(0), 1)

    def test_lower_rank_root_goes_under_higher_rank_root(self) -> None:
        disjoint_set = DisjointSet(3)
        disjoint_set.union(1, 2)
        disjoint_set.union(0, 1)
        self.assertEqual(disjoint_set.find(0), 1)
        self.assertEqual(disjoint_set.rank(0), 1)

    def test_find_compresses_the_whole_path(self) -> None:
        disjoint_set = DisjointSet(8)
        # Builds a tree of height 3 rooted at 0.
        for i, j in ((0, 1), (2, 3), (4, 5), (6, 7), (0, 2), (4, 6), (0, 4)):
            disjoint_set.union(i, j)
        self.assertEqual(disjoint_set.find(7), 0)
        self.assertEqual(disjoint_set._parent[7], 0)
        self.assertEqual(disjoint_set._parent[6], 0)

    def test_out_of_range_index_is_rejected(self) -> None:
        disjoint_set = DisjointSet(3)
        with self.assertRaises(IndexError):
            disjoint_set.find(3)
        with self.assertRaises(IndexError):
            disjoint_set.union(-1, 0)
        self.assertEqual(disjoint_set.count, 3)

    def test_matches_naive_components_on_random_unions(self) -> None:
        rng = random.Random(2024)
        size = 40
        disjoint_set = DisjointSet(size)
        labels = list(range(size))
        merges = 0
        for _ in range(120):
            i, j = rng.randrange(size), rng.randrange(size)
            expected = labels[i] != labels[j]
            self.assertEqual(disjoint_set.union(i, j), expected)
            if expected:
                merges += 1
                old, new = labels[j], labels[i]
                labels = [new if label == old else label for label in labels]
            self.assertEqual(disjoint_set.count, size - merges)
        for i in range(size):
            for j in range(size):
                self.assertEqual(disjoint_set.connected(i, j), labels[i] == labels[j])


if __name__ == "__main__":
    unittest.main()
