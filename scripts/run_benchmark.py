import sys

from lubm_bench.benchmark import main

if __name__ == "__main__":
    main(sys.argv[1:])
