class TreeNode:
    def __init__(self, is_leaf, prediction=None, feature_index=None, threshold=None, left=None, right=None):
        self.is_leaf = is_leaf
        self.prediction = prediction              # For leaf nodes
        self.feature_index = feature_index        # For decision nodes
        self.threshold = threshold                # For decision nodes
        self.left = left                          # Taken when x[feature_index] <= threshold
        self.right = right

    def iter_nodes(self, depth=0):
        """Yield (node, depth) pairs in pre-order (node, left subtree, right subtree)."""
        yield self, depth
        if not self.is_leaf:
            yield from self.left.iter_nodes(depth + 1)
            yield from self.right.iter_nodes(depth + 1)

    def __repr__(self):
        if self.is_leaf:
            return f"TreeNode(leaf={self.prediction})"
        return f"TreeNode(x[{self.feature_index}] <= {self.threshold!r})"
